from __future__ import annotations


def normalize_spaces(value: str) -> str:
    return " ".join((value or "").strip().split())


def split_command(text: str) -> tuple[str, str]:
    """Split a command line into its keyword and the stripped remainder."""
    parts = (text or "").strip().split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()
