from __future__ import annotations

import logging

log = logging.getLogger("chat_warden_bot")


class AccessService:
    """Decides who may run administrative commands in a conversation.

    A user is an admin when they are the configured super-admin, hold the
    admin role in the users table for that conversation, or are an admin or
    owner of the VK conversation itself.
    """

    def __init__(self, moderation_repo, transport, *, admin_user_id: int | None = None):
        self.moderation_repo = moderation_repo
        self.transport = transport
        self.admin_user_id = admin_user_id

    def is_super_admin(self, user_id: int) -> bool:
        return bool(self.admin_user_id and user_id == self.admin_user_id)

    async def is_admin(self, peer_id: int, user_id: int) -> bool:
        if not peer_id or not user_id:
            return False
        if self.is_super_admin(user_id):
            return True
        try:
            record = await self.moderation_repo.get_user(user_id, peer_id)
        except Exception:
            log.exception("Failed to load role peer_id=%s user_id=%s", peer_id, user_id)
            record = None
        if record is not None and record.is_admin:
            return True
        return await self.transport.is_conversation_admin(peer_id, user_id)
