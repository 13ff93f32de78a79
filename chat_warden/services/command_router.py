from __future__ import annotations

import logging
from dataclasses import dataclass

from chat_warden.core.commands import (
    CMD_BAN,
    CMD_BIND,
    CMD_DELTASK,
    CMD_GLOBAL_BAN,
    CMD_KICK,
    CMD_SETROLE,
    CMD_START,
    CMD_UNBAN,
    CMD_WARN,
    Ban,
    CommandError,
    CreateTask,
    DeleteTask,
    GlobalBan,
    Kick,
    ListTasks,
    SetRole,
    StartGroup,
    Stats,
    Unban,
    Warn,
    parse_command,
)

log = logging.getLogger("chat_warden_bot")

TARGET_COMMANDS = {
    Warn: CMD_WARN,
    Ban: CMD_BAN,
    Kick: CMD_KICK,
    Unban: CMD_UNBAN,
    GlobalBan: CMD_GLOBAL_BAN,
}

GROUP_ONLY_TEXT = "❌ Команда работает только в беседах"
FAILURE_TEXT = "❌ Не получилось выполнить команду, попробуйте позже"


def no_rights_text(command: str) -> str:
    return f"⛔ Нет прав на команду {command}"


@dataclass(slots=True)
class InboundEvent:
    sender_id: int
    destination_id: int
    text: str
    is_group_conversation: bool = False
    reply_from_id: int | None = None
    chat_title: str = ""
    members_count: int = 0


class CommandRouter:
    """Turns one inbound chat message into at most one reply."""

    def __init__(
        self,
        task_service,
        moderation_service,
        access_service,
        *,
        tasks_admin_only: bool = True,
        moderation_admin_only: bool = True,
    ):
        self.tasks = task_service
        self.moderation = moderation_service
        self.access = access_service
        self.tasks_admin_only = tasks_admin_only
        self.moderation_admin_only = moderation_admin_only

    async def handle(self, event: InboundEvent) -> str | None:
        command = parse_command(event.text)
        if command is None:
            return None
        if isinstance(command, CommandError):
            log.debug(
                "Rejected %s peer_id=%s user_id=%s: %s",
                command.command,
                event.destination_id,
                event.sender_id,
                command.reason,
            )
            return command.reason
        try:
            return await self._route(event, command)
        except Exception:
            log.exception(
                "Command %s failed peer_id=%s user_id=%s",
                type(command).__name__,
                event.destination_id,
                event.sender_id,
            )
            return FAILURE_TEXT

    async def _route(self, event: InboundEvent, command) -> str | None:
        peer_id = event.destination_id
        if isinstance(command, ListTasks):
            return self.tasks.list_text()
        if isinstance(command, CreateTask):
            if self.tasks_admin_only and not await self.access.is_admin(peer_id, event.sender_id):
                return no_rights_text(CMD_BIND)
            _, reply = await self.tasks.create(peer_id, command)
            return reply
        if isinstance(command, DeleteTask):
            if self.tasks_admin_only and not await self.access.is_admin(peer_id, event.sender_id):
                return no_rights_text(CMD_DELTASK)
            _, reply = await self.tasks.delete(command)
            return reply
        if isinstance(command, Stats):
            if event.is_group_conversation:
                return await self.moderation.chat_stats(peer_id)
            return await self.moderation.user_stats(event.sender_id, peer_id)
        if not event.is_group_conversation:
            return GROUP_ONLY_TEXT
        if isinstance(command, StartGroup):
            return await self._start_group(event)
        if isinstance(command, SetRole):
            if not await self.access.is_admin(peer_id, event.sender_id):
                return no_rights_text(CMD_SETROLE)
            return await self.moderation.set_role(peer_id, command)
        return await self._moderate(event, command)

    async def _start_group(self, event: InboundEvent) -> str:
        peer_id = event.destination_id
        if not await self.moderation.can_register_group(peer_id):
            if not await self.access.is_admin(peer_id, event.sender_id):
                return no_rights_text(CMD_START)
        return await self.moderation.register_group(
            peer_id,
            event.sender_id,
            event.chat_title,
            event.members_count,
        )

    async def _moderate(self, event: InboundEvent, command) -> str | None:
        name = TARGET_COMMANDS.get(type(command))
        if name is None:
            return None
        peer_id = event.destination_id
        if isinstance(command, GlobalBan):
            if not self.access.is_super_admin(event.sender_id):
                return no_rights_text(name)
        elif self.moderation_admin_only and not await self.access.is_admin(peer_id, event.sender_id):
            return no_rights_text(name)

        target_id = command.target_id or event.reply_from_id
        if not target_id or target_id <= 0:
            return f"❌ Укажите пользователя: `{name} <id>` или ответьте на его сообщение"
        if target_id == event.sender_id and not isinstance(command, Unban):
            return "❌ Нельзя применить команду к самому себе"

        if isinstance(command, Warn):
            return await self.moderation.warn(peer_id, target_id)
        if isinstance(command, Ban):
            return await self.moderation.ban(peer_id, target_id, command.reason)
        if isinstance(command, Kick):
            return await self.moderation.kick(peer_id, target_id, command.reason)
        if isinstance(command, Unban):
            return await self.moderation.unban(peer_id, target_id)
        return await self.moderation.global_ban(target_id, command.reason)
