"""Chat command parser.

Every supported command is a small frozen dataclass; ``parse_command`` turns
a message text into one of them, into a ``CommandError`` carrying the reason
to show the user, or into ``None`` when the text is not a command at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .ids import split_user_mention
from .text import split_command
from .time import normalize_time_string

CMD_BIND = "!bind"
CMD_TASKS = "!tasks"
CMD_DELTASK = "!deltask"
CMD_START = "/начать"
CMD_SETROLE = "!setrole"
CMD_WARN = "!warn"
CMD_BAN = "!ban"
CMD_KICK = "!kick"
CMD_UNBAN = "!unban"
CMD_GLOBAL_BAN = "!aban"
CMD_STATS = "!stats"

ROLE_ADMIN = "админ"
ROLE_USER = "пользователь"
ROLES = (ROLE_ADMIN, ROLE_USER)

_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_INDEX_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True, slots=True)
class CommandError:
    command: str
    reason: str


@dataclass(frozen=True, slots=True)
class CreateTask:
    time_of_day: str
    text: str
    repeat_count: int = 1


@dataclass(frozen=True, slots=True)
class ListTasks:
    pass


@dataclass(frozen=True, slots=True)
class DeleteTask:
    index: int


@dataclass(frozen=True, slots=True)
class StartGroup:
    pass


@dataclass(frozen=True, slots=True)
class SetRole:
    target_id: int
    role: str


@dataclass(frozen=True, slots=True)
class Warn:
    target_id: int | None


@dataclass(frozen=True, slots=True)
class Ban:
    target_id: int | None
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Kick:
    target_id: int | None
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Unban:
    target_id: int | None


@dataclass(frozen=True, slots=True)
class GlobalBan:
    target_id: int | None
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Stats:
    pass


TaskCommand = CreateTask | ListTasks | DeleteTask
ModerationCommand = StartGroup | SetRole | Warn | Ban | Kick | Unban | GlobalBan | Stats
Command = TaskCommand | ModerationCommand

BIND_USAGE = "❌ Использование: !bind HH:MM текст [кол-во повторов]"
DELTASK_USAGE = "❌ Использование: !deltask <номер>"
SETROLE_USAGE = "❌ Использование: !setrole <id> админ|пользователь"


def _parse_create(args: list[str]) -> CreateTask | CommandError:
    if len(args) < 2:
        return CommandError(CMD_BIND, BIND_USAGE)
    time_of_day = normalize_time_string(args[0])
    if time_of_day is None:
        return CommandError(CMD_BIND, "❌ Неверный формат времени, нужно HH:MM (00:00–23:59)")

    body = args[1:]
    repeat_count = 1
    if _INT_RE.match(body[-1]):
        repeat_count = int(body[-1])
        body = body[:-1]

    text = " ".join(body).strip()
    if not text:
        return CommandError(CMD_BIND, "❌ Текст задачи не может быть пустым")
    if repeat_count < 1:
        return CommandError(CMD_BIND, "❌ Количество повторов должно быть больше 0")
    return CreateTask(time_of_day=time_of_day, text=text, repeat_count=repeat_count)


def _parse_delete(args: list[str]) -> DeleteTask | CommandError:
    if len(args) != 1 or not _INDEX_RE.match(args[0]):
        return CommandError(CMD_DELTASK, DELTASK_USAGE)
    return DeleteTask(index=int(args[0]))


def _parse_target(command: str, rest: str) -> tuple[int | None, str] | CommandError:
    target_id, remainder = split_user_mention(rest)
    if target_id is None and rest and command in (CMD_WARN, CMD_UNBAN):
        return CommandError(command, f"❌ Не получилось определить user_id из «{rest}»")
    return target_id, remainder


def _parse_setrole(rest: str) -> SetRole | CommandError:
    target_id, role = split_user_mention(rest)
    if target_id is None or not role:
        return CommandError(CMD_SETROLE, SETROLE_USAGE)
    role = role.lower()
    if role not in ROLES:
        return CommandError(CMD_SETROLE, f"❌ Неизвестная роль «{role}», доступны: {', '.join(ROLES)}")
    return SetRole(target_id=target_id, role=role)


def parse_command(text: str) -> Command | CommandError | None:
    keyword, rest = split_command(text)
    if not keyword:
        return None

    if keyword == CMD_BIND:
        return _parse_create(rest.split())
    if keyword == CMD_TASKS:
        return ListTasks()
    if keyword == CMD_DELTASK:
        return _parse_delete(rest.split())
    if keyword == CMD_START:
        return StartGroup()
    if keyword == CMD_STATS:
        return Stats()
    if keyword == CMD_SETROLE:
        return _parse_setrole(rest)

    if keyword in (CMD_WARN, CMD_UNBAN, CMD_BAN, CMD_KICK, CMD_GLOBAL_BAN):
        parsed = _parse_target(keyword, rest)
        if isinstance(parsed, CommandError):
            return parsed
        target_id, reason = parsed
        if keyword == CMD_WARN:
            return Warn(target_id)
        if keyword == CMD_UNBAN:
            return Unban(target_id)
        if keyword == CMD_BAN:
            return Ban(target_id, reason)
        if keyword == CMD_KICK:
            return Kick(target_id, reason)
        return GlobalBan(target_id, reason)

    return None


ALL_COMMANDS = (
    CMD_BIND,
    CMD_TASKS,
    CMD_DELTASK,
    CMD_START,
    CMD_SETROLE,
    CMD_WARN,
    CMD_BAN,
    CMD_KICK,
    CMD_UNBAN,
    CMD_GLOBAL_BAN,
    CMD_STATS,
)
