from __future__ import annotations

from . import command_handlers, logger_handler


def register_handlers(bot, ctx) -> None:
    command_handlers.register(bot, ctx)
    logger_handler.register(bot, ctx)
