from __future__ import annotations

import logging

from vkbottle.bot import Message

from chat_warden.core.commands import ALL_COMMANDS, CMD_START
from chat_warden.core.ids import coerce_positive_int, is_group_peer
from chat_warden.core.rules import CommandRule, strip_bot_mention
from chat_warden.core.text import split_command
from chat_warden.services.command_router import InboundEvent

log = logging.getLogger("chat_warden_bot")


def extract_reply_from_id(message) -> int | None:
    reply_message = getattr(message, "reply_message", None)
    if not reply_message:
        return None
    reply_from_id = getattr(reply_message, "from_id", None)
    if reply_from_id is None and isinstance(reply_message, dict):
        reply_from_id = reply_message.get("from_id")
    return coerce_positive_int(reply_from_id)


async def build_inbound_event(message, transport) -> InboundEvent:
    text = strip_bot_mention(str(message.text or ""))
    peer_id = int(message.peer_id or 0)
    event = InboundEvent(
        sender_id=int(message.from_id or 0),
        destination_id=peer_id,
        text=text,
        is_group_conversation=is_group_peer(peer_id),
        reply_from_id=extract_reply_from_id(message),
    )
    keyword, _ = split_command(text)
    if keyword == CMD_START and event.is_group_conversation:
        event.chat_title, event.members_count = await transport.get_chat_info(peer_id)
    return event


def register(bot, ctx) -> None:
    router = ctx.services["router"]
    moderation = ctx.services["moderation"]
    transport = ctx.services["transport"]

    @bot.on.message(CommandRule(*ALL_COMMANDS))
    async def command_handler(message: Message):
        await moderation.track_user(message.from_id, message.peer_id)
        event = await build_inbound_event(message, transport)
        log.debug("Command peer_id=%s user_id=%s text=%r", event.destination_id, event.sender_id, event.text)
        reply = await router.handle(event)
        if reply:
            await transport.send(event.destination_id, reply)
