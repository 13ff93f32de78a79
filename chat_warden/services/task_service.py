from __future__ import annotations

import logging

from chat_warden.core.commands import CMD_TASKS, CreateTask, DeleteTask
from chat_warden.repositories.task_store import TaskStore
from chat_warden.tasks.models import ScheduledTask

log = logging.getLogger("chat_warden_bot")

EMPTY_LIST_TEXT = "📭 Запланированных сообщений нет."


def render_task_line(position: int, task: ScheduledTask) -> str:
    return f'{position}. [{task.time_of_day}] "{task.text}" ×{task.repeat_count}'


def render_task_list(tasks: list[ScheduledTask]) -> str:
    if not tasks:
        return EMPTY_LIST_TEXT
    return "\n".join(render_task_line(position, task) for position, task in enumerate(tasks, start=1))


class TaskService:
    def __init__(self, store: TaskStore, *, max_repeat_count: int = 20):
        self.store = store
        self.max_repeat_count = max_repeat_count

    async def create(self, destination: int, command: CreateTask) -> tuple[ScheduledTask | None, str]:
        if command.repeat_count > self.max_repeat_count:
            return None, f"❌ Количество повторов не может быть больше {self.max_repeat_count}"
        task = ScheduledTask.create(destination, command.time_of_day, command.text, command.repeat_count)
        async with self.store.lock:
            self.store.append(task)
            result = await self.store.persist()
        log.info(
            "Task created id=%s peer_id=%s time=%s repeat=%s",
            task.id,
            destination,
            task.time_of_day,
            task.repeat_count,
        )
        reply = f'✅ Задача добавлена:\n🕒 {task.time_of_day}\n💬 "{task.text}"\n🔁 {task.repeat_count} раз'
        if not result.ok:
            reply += "\n⚠️ Не удалось сохранить на диск, задача будет жить до перезапуска."
        return task, reply

    def list_text(self) -> str:
        return render_task_list(self.store.snapshot())

    async def delete(self, command: DeleteTask) -> tuple[ScheduledTask | None, str]:
        async with self.store.lock:
            size = len(self.store)
            if command.index < 1 or command.index > size:
                if size == 0:
                    return None, f"❌ Нет задач для удаления. Список: {CMD_TASKS}"
                return None, f"❌ Нет задачи с номером {command.index}. Доступно: 1–{size}"
            task = self.store.remove_at(command.index - 1)
            result = await self.store.persist()
        log.info("Task deleted id=%s position=%s", task.id, command.index)
        reply = f'🗑 Задача удалена: [{task.time_of_day}] "{task.text}"'
        if not result.ok:
            reply += "\n⚠️ Не удалось сохранить изменения на диск."
        return task, reply
