from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s"
OUTBOX_FORMAT = "[%(asctime)s] %(message)s"
OUTBOX_LOGGER = "chat_warden_bot.outbox"


def setup_logging(level: int = logging.DEBUG, message_log_file: str = "") -> logging.Logger:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if message_log_file:
        outbox = logging.getLogger(OUTBOX_LOGGER)
        if not any(isinstance(handler, logging.FileHandler) for handler in outbox.handlers):
            handler = logging.FileHandler(message_log_file, encoding="utf-8")
            handler.setFormatter(logging.Formatter(OUTBOX_FORMAT))
            outbox.addHandler(handler)
    return logging.getLogger("chat_warden_bot")
