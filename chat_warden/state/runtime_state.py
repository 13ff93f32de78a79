from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RuntimeState:
    bot_group_id: int | None = None
    started: bool = False
