from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class OpResult:
    """Outcome of a transport or persistence call.

    Calls that talk to VK or the disk return this instead of raising, so the
    caller decides whether to skip, report or retry.
    """

    ok: bool = False
    error: str = ""
    response_id: int = 0

    @classmethod
    def success(cls, response_id: Any = 0) -> "OpResult":
        try:
            value = int(response_id or 0)
        except (TypeError, ValueError):
            value = 0
        return cls(ok=True, response_id=value)

    @classmethod
    def failure(cls, error: Any) -> "OpResult":
        return cls(ok=False, error=str(error or "unknown error").strip())

    def __bool__(self) -> bool:
        return self.ok
