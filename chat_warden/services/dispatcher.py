from __future__ import annotations

import asyncio
import datetime
import logging
from dataclasses import dataclass, field

from chat_warden.core.time import MSK_TZ, format_hhmm, normalize_time_string
from chat_warden.repositories.task_store import TaskStore
from chat_warden.tasks.models import ScheduledTask

log = logging.getLogger("chat_warden_bot")


@dataclass(slots=True)
class TickReport:
    current_time: str
    dispatched: list[ScheduledTask] = field(default_factory=list)
    dropped: list[ScheduledTask] = field(default_factory=list)
    failed_sends: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.dispatched or self.dropped)


class TaskDispatcher:
    """Fires due announcements on a fixed polling tick.

    A task fires when its HH:MM equals the current minute in ``tz``; with
    ``tick_seconds <= 60`` every minute is observed at least once. Fired
    tasks are removed right away, so each task is sent at most once.
    """

    def __init__(self, store: TaskStore, transport, *, tz: datetime.tzinfo = MSK_TZ, tick_seconds: float = 10.0):
        self.store = store
        self.transport = transport
        self.tz = tz
        self.tick_seconds = max(1.0, float(tick_seconds))
        self._task: asyncio.Task | None = None

    async def tick(self, now: datetime.datetime | None = None) -> TickReport:
        report = TickReport(current_time=format_hhmm(now, self.tz))
        tasks = self.store.snapshot()
        for index in range(len(tasks) - 1, -1, -1):
            task = tasks[index]
            time_of_day = normalize_time_string(task.time_of_day)
            if time_of_day is None:
                log.warning("Dropping task id=%s with invalid time %r", task.id, task.time_of_day)
                async with self.store.lock:
                    self.store.remove(task)
                report.dropped.append(task)
                continue
            if task.dispatched:
                log.info("Dropping already dispatched task id=%s", task.id)
                async with self.store.lock:
                    self.store.remove(task)
                report.dropped.append(task)
                continue
            if time_of_day != report.current_time:
                continue
            # claimed before sending; a delete that ran earlier in this tick wins
            async with self.store.lock:
                if not self.store.remove(task):
                    log.info("Task id=%s was removed before dispatch, skipping", task.id)
                    continue
            task.dispatched = True
            report.failed_sends += await self._dispatch(task)
            report.dispatched.append(task)

        if report.changed:
            async with self.store.lock:
                await self.store.persist()
        return report

    async def _dispatch(self, task: ScheduledTask) -> int:
        failures = 0
        for attempt in range(1, task.repeat_count + 1):
            result = await self.transport.send(task.destination, task.text)
            if not result.ok:
                failures += 1
                log.warning(
                    "Send %s/%s failed for task id=%s peer_id=%s: %s",
                    attempt,
                    task.repeat_count,
                    task.id,
                    task.destination,
                    result.error,
                )
        if failures:
            log.warning(
                "Task id=%s retired with %s of %s sends failed",
                task.id,
                failures,
                task.repeat_count,
            )
        else:
            log.info(
                "Task id=%s dispatched to peer_id=%s x%s at %s",
                task.id,
                task.destination,
                task.repeat_count,
                task.time_of_day,
            )
        return failures

    async def run_forever(self) -> None:
        log.info("Dispatcher started, tick=%ss", self.tick_seconds)
        while True:
            try:
                await self.tick()
            except Exception as e:
                log.exception("Error in dispatcher tick: %s", e)
            await asyncio.sleep(self.tick_seconds)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run_forever())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
