import logging

from chat_warden.core.logging import OUTBOX_LOGGER, setup_logging


def test_outbox_file_receives_sent_messages(tmp_path):
    path = tmp_path / "logs.txt"
    outbox = logging.getLogger(OUTBOX_LOGGER)
    outbox.setLevel(logging.INFO)
    logger = setup_logging(logging.INFO, str(path))
    try:
        outbox.info("%s: %s", 2000000001, "привет")
        for handler in outbox.handlers:
            handler.flush()
        assert logger.name == "chat_warden_bot"
        assert "2000000001: привет" in path.read_text(encoding="utf-8")
    finally:
        for handler in list(outbox.handlers):
            outbox.removeHandler(handler)
            handler.close()
