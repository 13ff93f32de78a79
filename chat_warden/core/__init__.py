from .errors import ChatWardenError, ConfigError
from .ids import CHAT_PEER_OFFSET, is_group_peer, peer_to_chat_id, split_user_mention
from .logging import setup_logging
from .results import OpResult
from .text import normalize_spaces, split_command
from .time import MSK_TZ, format_hhmm, make_timezone, normalize_time_string, validate_time_string

__all__ = [
    "CHAT_PEER_OFFSET",
    "ChatWardenError",
    "ConfigError",
    "MSK_TZ",
    "OpResult",
    "format_hhmm",
    "is_group_peer",
    "make_timezone",
    "normalize_spaces",
    "normalize_time_string",
    "peer_to_chat_id",
    "setup_logging",
    "split_command",
    "split_user_mention",
    "validate_time_string",
]
