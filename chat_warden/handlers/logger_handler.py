from __future__ import annotations

from vkbottle.bot import Message


def register(bot, ctx) -> None:
    moderation = ctx.services["moderation"]

    @bot.on.message()
    async def track_author(message: Message):
        await moderation.track_user(message.from_id, message.peer_id)
