from __future__ import annotations

import logging
from dataclasses import dataclass

from chat_warden.config.env import (
    read_bool_env,
    read_float_env,
    read_int_env,
    read_log_level_env,
    read_str_env,
)
from chat_warden.core.errors import ConfigError

log = logging.getLogger("chat_warden_bot")


@dataclass(slots=True)
class BotConfig:
    vk_token: str = ""
    tasks_file: str = "tasks.json"
    db_path: str = "chat_warden.db"
    message_log_file: str = "logs.txt"
    timezone_offset_hours: float = 3.0
    scheduler_tick_seconds: int = 10
    tasks_admin_only: bool = True
    moderation_admin_only: bool = True
    max_repeat_count: int = 20
    admin_user_id: int | None = None
    log_level: int = logging.DEBUG


class SettingsService:
    """Builds BotConfig from the process environment."""

    def load_from_env(self) -> BotConfig:
        offset = read_float_env("TIMEZONE_OFFSET_HOURS", default=3.0)
        if offset is None or not -14 <= offset <= 14:
            log.warning("TIMEZONE_OFFSET_HOURS out of range, using +3")
            offset = 3.0
        return BotConfig(
            vk_token=read_str_env("VK_TOKEN"),
            tasks_file=read_str_env("TASKS_FILE", "tasks.json") or "tasks.json",
            db_path=read_str_env("DB_PATH", "chat_warden.db") or "chat_warden.db",
            message_log_file=read_str_env("MESSAGE_LOG_FILE", "logs.txt"),
            timezone_offset_hours=offset,
            scheduler_tick_seconds=read_int_env("SCHEDULER_TICK_SECONDS", default=10, min_value=1) or 10,
            tasks_admin_only=read_bool_env("TASKS_ADMIN_ONLY", default=True),
            moderation_admin_only=read_bool_env("MODERATION_ADMIN_ONLY", default=True),
            max_repeat_count=read_int_env("MAX_REPEAT_COUNT", default=20, min_value=1) or 20,
            admin_user_id=read_int_env("ADMIN_USER_ID"),
            log_level=read_log_level_env("LOG_LEVEL"),
        )

    def validate(self, config: BotConfig) -> BotConfig:
        if not config.vk_token:
            raise ConfigError("VK_TOKEN is not set")
        if config.scheduler_tick_seconds > 60:
            log.warning(
                "SCHEDULER_TICK_SECONDS=%s is above 60, announcements may miss their minute",
                config.scheduler_tick_seconds,
            )
        return config
