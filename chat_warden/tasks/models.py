from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from chat_warden.core.time import normalize_time_string, utc_now_iso


def _new_task_id() -> str:
    return uuid.uuid4().hex


def _coerce_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(slots=True)
class ScheduledTask:
    destination: int
    time_of_day: str
    text: str
    repeat_count: int = 1
    dispatched: bool = False
    created_at: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=_new_task_id)

    @classmethod
    def create(cls, destination: int, time_of_day: str, text: str, repeat_count: int = 1) -> "ScheduledTask":
        normalized = normalize_time_string(time_of_day)
        if normalized is None:
            raise ValueError(f"invalid time of day: {time_of_day!r}")
        if not text or not text.strip():
            raise ValueError("task text must not be empty")
        if int(repeat_count) < 1:
            raise ValueError("repeat_count must be >= 1")
        return cls(destination=int(destination), time_of_day=normalized, text=text, repeat_count=int(repeat_count))

    @classmethod
    def from_value(cls, value: Any) -> "ScheduledTask | None":
        """Build a task from its stored form, or None if the record is unusable.

        Accepts both the current keys and the legacy ones (peerId, time,
        times, sent). The time is kept verbatim so that a corrupt value can
        be dropped by the dispatcher instead of vanishing on load.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            return None
        destination = _coerce_int(value.get("destination", value.get("peerId")))
        text = value.get("text")
        if destination is None or not isinstance(text, str) or not text.strip():
            return None
        time_of_day = value.get("timeOfDay", value.get("time"))
        repeat_count = _coerce_int(value.get("repeatCount", value.get("times")))
        created_at = value.get("createdAt")
        task_id = value.get("id")
        return cls(
            destination=destination,
            time_of_day="" if time_of_day is None else str(time_of_day),
            text=text,
            repeat_count=repeat_count if repeat_count and repeat_count > 0 else 1,
            dispatched=bool(value.get("dispatched", value.get("sent", False))),
            created_at=str(created_at) if created_at else utc_now_iso(),
            id=str(task_id) if task_id else _new_task_id(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "destination": int(self.destination),
            "timeOfDay": self.time_of_day,
            "text": self.text,
            "repeatCount": int(self.repeat_count),
            "dispatched": bool(self.dispatched),
            "createdAt": self.created_at,
        }
