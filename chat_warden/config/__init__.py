from .settings import BotConfig, SettingsService

__all__ = ["BotConfig", "SettingsService"]
