from __future__ import annotations

import logging
import os

TRUE_VALUES = {"1", "true", "yes", "on"}


def read_str_env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip()


def read_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def read_int_env(name: str, default: int | None = None, min_value: int | None = None) -> int | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        logging.getLogger("chat_warden_bot").warning("%s is not a valid integer", name)
        return default
    if min_value is not None and number < min_value:
        return min_value
    return number


def read_float_env(name: str, default: float | None = None) -> float | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger("chat_warden_bot").warning("%s is not a valid float", name)
        return default


def read_log_level_env(name: str, default: int = logging.DEBUG) -> int:
    value = os.getenv(name)
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    logging.getLogger("chat_warden_bot").warning("%s is not a valid log level: %s", name, value)
    return default
