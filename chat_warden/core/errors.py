from __future__ import annotations


class ChatWardenError(Exception):
    pass


class ConfigError(ChatWardenError):
    """Required startup configuration is missing or unusable."""
