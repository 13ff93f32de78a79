from __future__ import annotations

import logging

from vkbottle.bot import Bot

from chat_warden.app_context import AppContext
from chat_warden.config.settings import BotConfig, SettingsService
from chat_warden.core.errors import ConfigError
from chat_warden.core.logging import setup_logging
from chat_warden.core.rules import configure_bot_group_id_provider
from chat_warden.core.time import make_timezone
from chat_warden.handlers import register_handlers
from chat_warden.infra import VkTransport
from chat_warden.repositories import ModerationRepo, TaskStore
from chat_warden.services import (
    AccessService,
    CommandRouter,
    ModerationService,
    TaskDispatcher,
    TaskService,
)
from chat_warden.state import RuntimeState

log = logging.getLogger("chat_warden_bot")


def extract_group_id(group_response):
    if not group_response:
        return None
    if isinstance(group_response, list):
        first = group_response[0] if group_response else None
        return getattr(first, "id", None) if first else None
    direct_id = getattr(group_response, "id", None)
    if direct_id:
        return direct_id
    groups = getattr(group_response, "groups", None)
    if groups:
        return getattr(groups[0], "id", None)
    return None


def _build_repositories(config: BotConfig) -> dict[str, object]:
    return {
        "tasks": TaskStore(config.tasks_file),
        "moderation": ModerationRepo(config.db_path),
    }


def _build_services(config: BotConfig, repos: dict, transport: VkTransport) -> dict[str, object]:
    access = AccessService(repos["moderation"], transport, admin_user_id=config.admin_user_id)
    moderation = ModerationService(repos["moderation"], transport)
    tasks = TaskService(repos["tasks"], max_repeat_count=config.max_repeat_count)
    router = CommandRouter(
        tasks,
        moderation,
        access,
        tasks_admin_only=config.tasks_admin_only,
        moderation_admin_only=config.moderation_admin_only,
    )
    dispatcher = TaskDispatcher(
        repos["tasks"],
        transport,
        tz=make_timezone(config.timezone_offset_hours),
        tick_seconds=config.scheduler_tick_seconds,
    )
    return {
        "transport": transport,
        "access": access,
        "moderation": moderation,
        "tasks": tasks,
        "router": router,
        "dispatcher": dispatcher,
    }


def create_app(config: BotConfig | None = None) -> AppContext:
    settings_service = SettingsService()
    config = settings_service.validate(config or settings_service.load_from_env())
    state = RuntimeState()
    configure_bot_group_id_provider(lambda: state.bot_group_id)
    bot = Bot(token=config.vk_token)
    repos = _build_repositories(config)
    services = _build_services(config, repos, VkTransport(bot.api))
    ctx = AppContext(config=config, state=state, repos=repos, services=services, bot=bot)
    register_handlers(bot, ctx)
    return ctx


async def start_background_tasks(ctx: AppContext) -> None:
    await ctx.repos["moderation"].init_db()
    await ctx.repos["tasks"].load()
    try:
        group_response = await ctx.bot.api.groups.get_by_id()
        ctx.state.bot_group_id = extract_group_id(group_response)
        if not ctx.state.bot_group_id:
            log.warning("Failed to detect bot group id from API response")
        else:
            log.info("Detected bot group id=%s", ctx.state.bot_group_id)
    except Exception as e:
        log.exception("Failed to load group id: %s", e)
    ctx.services["dispatcher"].start()
    ctx.state.started = True


async def stop_background_tasks(ctx: AppContext) -> None:
    await ctx.services["dispatcher"].stop()
    store = ctx.repos["tasks"]
    async with store.lock:
        await store.persist()
    ctx.state.started = False


class _StartupTask:
    """Compat wrapper: works whether VKBottle expects a callable or an awaitable in on_startup."""

    def __init__(self, coro_func, *args):
        self._coro_func = coro_func
        self._args = args

    def __call__(self):
        return self._coro_func(*self._args)

    def __await__(self):
        return self._coro_func(*self._args).__await__()


def run() -> None:
    settings_service = SettingsService()
    config = settings_service.load_from_env()
    setup_logging(config.log_level, config.message_log_file)
    try:
        ctx = create_app(config)
    except ConfigError as e:
        log.error("Cannot start: %s", e)
        raise SystemExit(1) from e
    log.info(
        "Starting chat-warden tasks_file=%s db=%s tz_offset=%s tick=%ss",
        config.tasks_file,
        config.db_path,
        config.timezone_offset_hours,
        config.scheduler_tick_seconds,
    )
    bot = ctx.bot
    bot.loop_wrapper.on_startup.append(_StartupTask(start_background_tasks, ctx))
    on_shutdown = getattr(bot.loop_wrapper, "on_shutdown", None)
    if on_shutdown is not None and hasattr(on_shutdown, "append"):
        on_shutdown.append(_StartupTask(stop_background_tasks, ctx))
    bot.run_forever()
