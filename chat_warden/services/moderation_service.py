from __future__ import annotations

import logging

from chat_warden.core.commands import ROLE_ADMIN, SetRole
from chat_warden.repositories.moderation_repo import GLOBAL_CHAT_ID, ModerationRepo

log = logging.getLogger("chat_warden_bot")

NO_REASON = "не указана"
REMOVE_FAILED_NOTE = "\n⚠️ Не удалось исключить пользователя из беседы."


def _reason_text(reason: str) -> str:
    return reason or NO_REASON


class ModerationService:
    """Moderation and statistics actions; callers check permissions first."""

    def __init__(self, repo: ModerationRepo, transport):
        self.repo = repo
        self.transport = transport

    async def track_user(self, user_id: int, peer_id: int) -> None:
        if not user_id or user_id <= 0:
            return
        try:
            await self.repo.ensure_user(user_id, peer_id)
        except Exception:
            log.exception("Failed to store user peer_id=%s user_id=%s", peer_id, user_id)

    async def can_register_group(self, peer_id: int) -> bool:
        return not await self.repo.is_group_registered(peer_id)

    async def register_group(self, peer_id: int, sender_id: int, title: str, members_count: int) -> str:
        await self.repo.upsert_group(peer_id, title or "Без названия", members_count)
        await self.repo.set_role(sender_id, peer_id, ROLE_ADMIN)
        log.info("Group registered peer_id=%s admin=%s", peer_id, sender_id)
        return "✅ Группа добавлена в базу, вы назначены админом"

    async def set_role(self, peer_id: int, command: SetRole) -> str:
        await self.repo.set_role(command.target_id, peer_id, command.role)
        log.info("Role set peer_id=%s user_id=%s role=%s", peer_id, command.target_id, command.role)
        return f"✅ Роль пользователя {command.target_id} изменена на {command.role}"

    async def warn(self, peer_id: int, target_id: int) -> str:
        warns = await self.repo.add_warn(target_id, peer_id)
        log.info("Warn peer_id=%s user_id=%s total=%s", peer_id, target_id, warns)
        return f"⚠️ Пользователь {target_id} получил локальный варн (всего: {warns})"

    async def ban(self, peer_id: int, target_id: int, reason: str = "") -> str:
        await self.repo.ban_user(target_id, peer_id, reason=reason)
        removal = await self.transport.remove_participant(peer_id, target_id)
        log.info("Ban peer_id=%s user_id=%s removed=%s", peer_id, target_id, removal.ok)
        reply = f"⛔ Пользователь {target_id} забанен. Причина: {_reason_text(reason)}"
        if not removal.ok:
            reply += REMOVE_FAILED_NOTE
        return reply

    async def kick(self, peer_id: int, target_id: int, reason: str = "") -> str:
        await self.repo.record_kick(target_id, peer_id, reason)
        removal = await self.transport.remove_participant(peer_id, target_id)
        log.info("Kick peer_id=%s user_id=%s removed=%s", peer_id, target_id, removal.ok)
        if not removal.ok:
            return f"❌ Не удалось кикнуть пользователя {target_id}: {removal.error}"
        return f"👢 Пользователь {target_id} кикнут. Причина: {_reason_text(reason)}"

    async def unban(self, peer_id: int, target_id: int) -> str:
        lifted = await self.repo.unban_user(target_id, peer_id)
        log.info("Unban peer_id=%s user_id=%s lifted=%s", peer_id, target_id, lifted)
        if not lifted:
            return f"ℹ️ Пользователь {target_id} не был забанен в этом чате"
        return f"✅ Пользователь {target_id} разбанен"

    async def global_ban(self, target_id: int, reason: str = "") -> str:
        await self.repo.ban_user(target_id, GLOBAL_CHAT_ID, is_global=True, reason=reason)
        log.info("Global ban user_id=%s", target_id)
        return f"⛔ Пользователь {target_id} глобально забанен. Причина: {_reason_text(reason)}"

    async def chat_stats(self, peer_id: int) -> str:
        stats = await self.repo.get_chat_stats(peer_id)
        return (
            "📊 Статистика чата:\n"
            f"👥 Участников: {stats.members}\n"
            f"⚠️ Варнов: {stats.warns}\n"
            f"⛔ Забанено: {stats.banned}"
        )

    async def user_stats(self, user_id: int, peer_id: int) -> str:
        record = await self.repo.get_user(user_id, peer_id)
        global_record = await self.repo.get_user(user_id, GLOBAL_CHAT_ID)
        if record is None and global_record is None:
            return "📊 Про вас пока ничего не известно."
        warns = record.warns if record else 0
        banned = bool(record and record.banned)
        globally_banned = bool(global_record and global_record.banned)
        role = record.role if record else global_record.role
        return (
            "📊 Ваша статистика:\n"
            f"👤 ID: {user_id}\n"
            f"⚠️ Варны: {warns}\n"
            f"⛔ Бан: {'Да' if banned else 'Нет'}\n"
            f"🌐 Глобальный бан: {'Да' if globally_banned else 'Нет'}\n"
            f"Роль: {role}"
        )

