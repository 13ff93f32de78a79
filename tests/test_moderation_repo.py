import pytest

from chat_warden.repositories.moderation_repo import GLOBAL_CHAT_ID, ModerationRepo

PEER = 2000000001


async def _repo(tmp_path) -> ModerationRepo:
    repo = ModerationRepo(str(tmp_path / "moderation.db"))
    await repo.init_db()
    return repo


@pytest.mark.asyncio
async def test_warns_accumulate_per_chat(tmp_path):
    repo = await _repo(tmp_path)

    assert await repo.add_warn(10, PEER) == 1
    assert await repo.add_warn(10, PEER) == 2
    assert await repo.add_warn(10, PEER + 1) == 1

    record = await repo.get_user(10, PEER)
    assert record.warns == 2
    assert record.banned is False


@pytest.mark.asyncio
async def test_ban_and_unban(tmp_path):
    repo = await _repo(tmp_path)
    await repo.ensure_user(11, PEER)

    await repo.ban_user(11, PEER, reason="spam")
    assert (await repo.get_user(11, PEER)).banned is True

    assert await repo.unban_user(11, PEER) is True
    assert await repo.unban_user(11, PEER) is False
    assert (await repo.get_user(11, PEER)).banned is False


@pytest.mark.asyncio
async def test_global_ban_uses_global_row(tmp_path):
    repo = await _repo(tmp_path)

    await repo.ban_user(12, PEER, is_global=True, reason="scam")

    assert await repo.get_user(12, PEER) is None
    record = await repo.get_user(12, GLOBAL_CHAT_ID)
    assert record.banned is True
    assert record.is_global is True


@pytest.mark.asyncio
async def test_set_role_and_ensure_user_do_not_clobber(tmp_path):
    repo = await _repo(tmp_path)

    await repo.set_role(13, PEER, "админ")
    await repo.ensure_user(13, PEER)

    record = await repo.get_user(13, PEER)
    assert record.role == "админ"
    assert record.is_admin is True


@pytest.mark.asyncio
async def test_group_registration_and_stats(tmp_path):
    repo = await _repo(tmp_path)
    assert await repo.is_group_registered(PEER) is False

    await repo.upsert_group(PEER, "Chat", 4)
    await repo.upsert_group(PEER, "Renamed", 6)
    assert await repo.is_group_registered(PEER) is True

    await repo.ensure_user(1, PEER)
    await repo.add_warn(2, PEER)
    await repo.add_warn(2, PEER)
    await repo.ban_user(3, PEER)
    await repo.record_kick(4, PEER, "flood")

    stats = await repo.get_chat_stats(PEER)
    assert (stats.members, stats.warns, stats.banned) == (3, 2, 1)
