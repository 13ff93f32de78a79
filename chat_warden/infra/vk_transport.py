from __future__ import annotations

import logging
from typing import Any

from chat_warden.core.ids import is_group_peer, peer_to_chat_id
from chat_warden.core.logging import OUTBOX_LOGGER
from chat_warden.core.results import OpResult
from chat_warden.core.text import normalize_spaces

log = logging.getLogger("chat_warden_bot")
outbox = logging.getLogger(OUTBOX_LOGGER)


def _unwrap(response: Any) -> Any:
    if isinstance(response, dict) and "response" in response:
        return response["response"]
    return response


def _get(value: Any, key: str, default=None):
    if isinstance(value, dict):
        return value.get(key, default)
    return getattr(value, key, default)


class VkTransport:
    """Outbound side of the VK API used by the bot.

    Every call returns an OpResult (or a plain bool for lookups) instead of
    raising; failures are logged here once.
    """

    def __init__(self, api):
        self.api = api

    async def send(self, peer_id: int, text: str) -> OpResult:
        payload: dict[str, Any] = {
            "peer_id": int(peer_id),
            "message": str(text or ""),
            # 0 disables VK-side deduplication, repeated announcements must not collapse
            "random_id": 0,
        }
        try:
            response = await self.api.request("messages.send", payload)
        except Exception as e:
            log.error("messages.send failed peer_id=%s: %s", peer_id, e)
            return OpResult.failure(e)
        outbox.info("%s: %s", peer_id, text)
        return OpResult.success(_unwrap(response))

    async def remove_participant(self, peer_id: int, user_id: int) -> OpResult:
        if not is_group_peer(peer_id):
            return OpResult.failure("not a group conversation")
        payload = {"chat_id": peer_to_chat_id(peer_id), "member_id": int(user_id)}
        try:
            response = await self.api.request("messages.removeChatUser", payload)
        except Exception as e:
            log.error("messages.removeChatUser failed peer_id=%s user_id=%s: %s", peer_id, user_id, e)
            return OpResult.failure(e)
        return OpResult.success(_unwrap(response))

    async def get_chat_info(self, peer_id: int) -> tuple[str, int]:
        """Return (title, members_count) of a group conversation, or ("", 0)."""
        if not is_group_peer(peer_id):
            return "", 0
        try:
            response = await self.api.request("messages.getConversationsById", {"peer_ids": str(int(peer_id))})
        except Exception as e:
            log.debug("Failed to fetch chat info peer_id=%s: %s", peer_id, e)
            return "", 0
        items = _get(_unwrap(response), "items") or []
        for item in items:
            peer = _get(item, "peer")
            if peer is not None and _get(peer, "id") not in (None, int(peer_id)):
                continue
            settings = _get(item, "chat_settings") or {}
            title = normalize_spaces(str(_get(settings, "title") or ""))
            try:
                members_count = int(_get(settings, "members_count") or 0)
            except (TypeError, ValueError):
                members_count = 0
            return title, members_count
        return "", 0

    async def is_conversation_admin(self, peer_id: int, user_id: int) -> bool:
        if not is_group_peer(peer_id) or not user_id:
            return False
        try:
            response = await self.api.request("messages.getConversationMembers", {"peer_id": int(peer_id)})
        except Exception:
            log.exception("Failed to check chat admin peer_id=%s user_id=%s", peer_id, user_id)
            return False
        items = _get(_unwrap(response), "items") or []
        for item in items:
            if _get(item, "member_id") != user_id:
                continue
            return bool(_get(item, "is_admin") or _get(item, "is_owner"))
        return False
