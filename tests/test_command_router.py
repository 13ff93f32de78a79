import json

import pytest

from chat_warden.repositories.moderation_repo import ModerationRepo
from chat_warden.repositories.task_store import TaskStore
from chat_warden.services.command_router import (
    GROUP_ONLY_TEXT,
    CommandRouter,
    InboundEvent,
)
from chat_warden.services.moderation_service import REMOVE_FAILED_NOTE, ModerationService
from chat_warden.services.task_service import EMPTY_LIST_TEXT, TaskService
from tests.fakes import FakeAccess, FakeTransport

PEER = 2000000005
ADMIN = 100
USER = 200


async def _router(tmp_path, *, admins=(ADMIN,), super_admin=None, transport=None, **flags):
    store = TaskStore(tmp_path / "tasks.json")
    repo = ModerationRepo(str(tmp_path / "moderation.db"))
    await repo.init_db()
    transport = transport or FakeTransport()
    router = CommandRouter(
        TaskService(store),
        ModerationService(repo, transport),
        FakeAccess(admins=set(admins), super_admin=super_admin),
        **flags,
    )
    return router, store, repo, transport


def _event(text, sender=ADMIN, *, group=True, reply_from_id=None):
    return InboundEvent(
        sender_id=sender,
        destination_id=PEER,
        text=text,
        is_group_conversation=group,
        reply_from_id=reply_from_id,
    )


@pytest.mark.asyncio
async def test_create_persists_new_task(tmp_path):
    router, store, _, _ = await _router(tmp_path)

    reply = await router.handle(_event("!bind 9:30 доброе утро"))

    assert reply.startswith("✅ Задача добавлена")
    saved = json.loads((tmp_path / "tasks.json").read_text(encoding="utf-8"))
    assert len(saved) == 1
    assert saved[0]["destination"] == PEER
    assert saved[0]["timeOfDay"] == "09:30"
    assert saved[0]["text"] == "доброе утро"
    assert saved[0]["repeatCount"] == 1
    assert saved[0]["dispatched"] is False
    assert len(store) == 1


@pytest.mark.asyncio
async def test_list_formats_tasks_and_empty_message(tmp_path):
    router, _, _, _ = await _router(tmp_path)

    assert await router.handle(_event("!tasks", USER)) == EMPTY_LIST_TEXT

    await router.handle(_event("!bind 08:00 one"))
    await router.handle(_event("!bind 20:15 two 2"))

    assert await router.handle(_event("!tasks", USER)) == '1. [08:00] "one" ×1\n2. [20:15] "two" ×2'


@pytest.mark.asyncio
async def test_delete_keeps_remaining_order(tmp_path):
    router, store, _, _ = await _router(tmp_path)
    for text in ("!bind 08:00 a", "!bind 09:00 b", "!bind 10:00 c"):
        await router.handle(_event(text))

    reply = await router.handle(_event("!deltask 1"))

    assert reply.startswith("🗑")
    assert [task.text for task in store.snapshot()] == ["b", "c"]
    saved = json.loads((tmp_path / "tasks.json").read_text(encoding="utf-8"))
    assert [item["text"] for item in saved] == ["b", "c"]


@pytest.mark.asyncio
async def test_delete_out_of_range_does_not_mutate(tmp_path):
    router, store, _, _ = await _router(tmp_path)
    await router.handle(_event("!bind 08:00 a"))
    await router.handle(_event("!bind 09:00 b"))

    reply = await router.handle(_event("!deltask 5"))

    assert reply.startswith("❌")
    assert "1–2" in reply
    assert len(store) == 2


@pytest.mark.asyncio
async def test_non_admin_cannot_manage_tasks(tmp_path):
    router, store, _, _ = await _router(tmp_path)

    assert "Нет прав" in await router.handle(_event("!bind 08:00 a", USER))
    assert "Нет прав" in await router.handle(_event("!deltask 1", USER))
    assert len(store) == 0


@pytest.mark.asyncio
async def test_task_commands_open_to_everyone_when_configured(tmp_path):
    router, store, _, _ = await _router(tmp_path, tasks_admin_only=False)

    reply = await router.handle(_event("!bind 08:00 a", USER))

    assert reply.startswith("✅")
    assert len(store) == 1


@pytest.mark.asyncio
async def test_parse_errors_and_plain_text(tmp_path):
    router, _, _, _ = await _router(tmp_path)

    assert await router.handle(_event("just chatting")) is None
    assert "HH:MM" in await router.handle(_event("!bind 9 text"))


@pytest.mark.asyncio
async def test_moderation_is_group_only(tmp_path):
    router, _, _, _ = await _router(tmp_path)

    assert await router.handle(_event("!warn 5", group=False)) == GROUP_ONLY_TEXT


@pytest.mark.asyncio
async def test_ban_by_reply_reports_removal_failure(tmp_path):
    transport = FakeTransport()
    transport.remove_ok = False
    router, _, repo, _ = await _router(tmp_path, transport=transport)

    reply = await router.handle(_event("!ban флуд", reply_from_id=USER))

    assert "забанен" in reply
    assert "флуд" in reply
    assert reply.endswith(REMOVE_FAILED_NOTE)
    assert (await repo.get_user(USER, PEER)).banned is True


@pytest.mark.asyncio
async def test_kick_removes_participant(tmp_path):
    router, _, _, transport = await _router(tmp_path)

    reply = await router.handle(_event(f"!kick [id{USER}|Вася Пупкин] шум"))

    assert "кикнут" in reply
    assert transport.removed == [(PEER, USER)]


@pytest.mark.asyncio
async def test_moderation_target_rules(tmp_path):
    router, _, _, _ = await _router(tmp_path)

    assert "Укажите пользователя" in await router.handle(_event("!warn"))
    assert "самому себе" in await router.handle(_event(f"!warn {ADMIN}"))
    assert "Нет прав" in await router.handle(_event(f"!warn {ADMIN}", USER))
    assert "всего: 1" in await router.handle(_event(f"!warn {USER}"))


@pytest.mark.asyncio
async def test_global_ban_requires_super_admin(tmp_path):
    router, _, _, _ = await _router(tmp_path, super_admin=1)

    assert "Нет прав" in await router.handle(_event("!aban 300 scam"))
    assert "глобально" in await router.handle(_event("!aban 300 scam", 1))


@pytest.mark.asyncio
async def test_start_registers_group_once(tmp_path):
    router, _, repo, _ = await _router(tmp_path, admins=())

    first = await router.handle(_event("/начать", USER))
    assert first.startswith("✅")
    assert (await repo.get_user(USER, PEER)).is_admin is True

    assert "Нет прав" in await router.handle(_event("/начать", 300))


@pytest.mark.asyncio
async def test_stats_in_chat_and_private(tmp_path):
    router, _, repo, _ = await _router(tmp_path)
    await repo.add_warn(USER, PEER)

    chat = await router.handle(_event("!stats", USER))
    assert "Варнов: 1" in chat

    private = await router.handle(_event("!stats", USER, group=False))
    assert "Варны: 1" in private


@pytest.mark.asyncio
async def test_repeat_count_above_limit_is_rejected(tmp_path):
    router, store, _, _ = await _router(tmp_path)
    router.tasks.max_repeat_count = 5

    reply = await router.handle(_event("!bind 09:00 spam 6"))

    assert reply.startswith("❌")
    assert "5" in reply
    assert len(store) == 0
    assert (await router.handle(_event("!bind 09:00 ok 5"))).startswith("✅")


@pytest.mark.asyncio
async def test_non_ascii_digit_index_gets_usage_reply(tmp_path):
    router, _, _, _ = await _router(tmp_path)

    assert "!deltask" in await router.handle(_event("!deltask ²"))
