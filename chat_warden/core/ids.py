from __future__ import annotations

import re

CHAT_PEER_OFFSET = 2_000_000_000


def is_group_peer(peer_id: int | None) -> bool:
    return bool(peer_id) and int(peer_id) > CHAT_PEER_OFFSET


def peer_to_chat_id(peer_id: int) -> int:
    return int(peer_id) - CHAT_PEER_OFFSET


def coerce_positive_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


_LEADING_MENTION_RE = re.compile(
    r"^(?:\[id(?P<bracket>\d+)\|[^\]]*\]|@id(?P<at>\d+)|id(?P<plain>\d+)|(?P<digits>\d+))(?=\s|$)",
    flags=re.IGNORECASE,
)


def split_user_mention(text: str) -> tuple[int | None, str]:
    """Take a user reference off the front of ``text``.

    Returns (user_id, rest); user_id is None when the text does not start
    with ``123``, ``id123``, ``@id123`` or ``[id123|Name]``.
    """
    cleaned = (text or "").strip()
    match = _LEADING_MENTION_RE.match(cleaned)
    if not match:
        return None, cleaned
    value = next(group for group in match.groupdict().values() if group)
    return int(value), cleaned[match.end():].strip()
