from __future__ import annotations

import re
from typing import Callable

from vkbottle.bot import Message
from vkbottle.dispatch.rules import ABCRule


_bot_group_id_provider: Callable[[], int | None] = lambda: None


def configure_bot_group_id_provider(provider: Callable[[], int | None]) -> None:
    global _bot_group_id_provider
    _bot_group_id_provider = provider


def strip_bot_mention(text: str) -> str:
    if not text:
        return text
    group_id = _bot_group_id_provider()
    if group_id:
        pattern = str(group_id)
    else:
        pattern = r"\d+"
    cleaned = re.sub(rf"^\s*\[(?:club|public){pattern}\|[^\]]+\]\s*,?", "", text, flags=re.IGNORECASE)
    cleaned = re.sub(rf"^\s*@(?:club|public){pattern}\b\s*,?", "", cleaned, flags=re.IGNORECASE)
    return cleaned.strip()


class CommandRule(ABCRule[Message]):
    """Matches when the first word equals one of the commands (case-sensitive)."""

    def __init__(self, *commands: str):
        self.commands = frozenset(commands)

    async def check(self, event: Message) -> bool:
        text = strip_bot_mention(event.text or "")
        parts = text.split(maxsplit=1)
        return bool(parts) and parts[0] in self.commands
