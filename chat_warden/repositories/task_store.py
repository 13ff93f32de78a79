from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from chat_warden.core.results import OpResult
from chat_warden.tasks.models import ScheduledTask

log = logging.getLogger("chat_warden_bot")


class TaskStore:
    """Scheduled announcements kept in memory and mirrored to a JSON file.

    The in-memory list is the store of record. ``append`` and ``remove_at``
    only touch memory; callers hold ``lock`` around a mutation and the
    following ``persist`` so a command and a dispatcher tick never interleave
    their writes.
    """

    def __init__(self, path: str | Path = "tasks.json"):
        self.path = Path(path)
        self.lock = asyncio.Lock()
        self._tasks: list[ScheduledTask] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def snapshot(self) -> list[ScheduledTask]:
        return list(self._tasks)

    def append(self, task: ScheduledTask) -> None:
        self._tasks.append(task)

    def remove_at(self, index: int) -> ScheduledTask:
        if index < 0 or index >= len(self._tasks):
            raise IndexError(f"task index out of range: {index}")
        return self._tasks.pop(index)

    def remove(self, task: ScheduledTask) -> bool:
        for index, current in enumerate(self._tasks):
            if current.id == task.id:
                del self._tasks[index]
                return True
        return False

    async def load(self) -> list[ScheduledTask]:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            data = json.loads(raw)
        except FileNotFoundError:
            log.warning("Tasks file %s not found, starting with an empty list", self.path)
            return await self._reset()
        except (OSError, ValueError) as e:
            log.error("Failed to load tasks from %s: %s", self.path, e)
            return await self._reset()
        if not isinstance(data, list):
            log.error("Tasks file %s is not a JSON array, replacing with []", self.path)
            return await self._reset()

        tasks: list[ScheduledTask] = []
        for position, item in enumerate(data):
            try:
                task = ScheduledTask.from_value(item)
            except Exception as e:
                log.warning("Skipping unreadable task #%s in %s: %s", position, self.path, e)
                continue
            if task is None:
                log.warning("Skipping malformed task #%s in %s: %r", position, self.path, item)
                continue
            tasks.append(task)
        self._tasks = tasks
        log.info("Loaded %s tasks from %s", len(tasks), self.path)
        return self.snapshot()

    async def _reset(self) -> list[ScheduledTask]:
        self._tasks = []
        await self.persist()
        return []

    async def persist(self, tasks: list[ScheduledTask] | None = None) -> OpResult:
        items = self._tasks if tasks is None else tasks
        try:
            payload = json.dumps([task.to_dict() for task in items], ensure_ascii=False, indent=2)
            await asyncio.to_thread(self._write_atomic, payload)
        except (OSError, ValueError, TypeError) as e:
            log.exception("Failed to save tasks to %s", self.path)
            return OpResult.failure(e)
        return OpResult.success()

    def _write_atomic(self, payload: str) -> None:
        data = payload.encode("utf-8")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, self.path)
