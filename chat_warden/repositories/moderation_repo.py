from __future__ import annotations

import datetime
import os
from dataclasses import dataclass

import aiosqlite

from chat_warden.core.commands import ROLE_ADMIN, ROLE_USER

GLOBAL_CHAT_ID = 0


@dataclass(slots=True)
class UserRecord:
    user_id: int
    chat_id: int
    warns: int = 0
    banned: bool = False
    is_global: bool = False
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(slots=True)
class ChatStats:
    members: int = 0
    banned: int = 0
    warns: int = 0


def _utc_now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class ModerationRepo:
    """Users, roles, warns, bans and registered chats in SQLite."""

    def __init__(self, db_path: str = "chat_warden.db"):
        self.db_path = str(db_path)

    def _connect(self):
        return aiosqlite.connect(self.db_path)

    async def init_db(self) -> None:
        folder = os.path.dirname(self.db_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        async with self._connect() as db:
            await db.execute(
                "CREATE TABLE IF NOT EXISTS users ("
                "user_id INTEGER NOT NULL, "
                "chat_id INTEGER NOT NULL DEFAULT 0, "
                "warns INTEGER DEFAULT 0, "
                "banned INTEGER DEFAULT 0, "
                "is_global INTEGER DEFAULT 0, "
                f"role TEXT DEFAULT '{ROLE_USER}', "
                "PRIMARY KEY (user_id, chat_id)"
                ")"
            )
            await db.execute(
                "CREATE TABLE IF NOT EXISTS groups ("
                "chat_id INTEGER PRIMARY KEY, "
                "title TEXT, "
                "members_count INTEGER DEFAULT 0"
                ")"
            )
            await db.execute(
                "CREATE TABLE IF NOT EXISTS bans ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "user_id INTEGER NOT NULL, "
                "chat_id INTEGER NOT NULL DEFAULT 0, "
                "reason TEXT, "
                "banned_at TEXT, "
                "is_global INTEGER DEFAULT 0"
                ")"
            )
            await db.execute("CREATE INDEX IF NOT EXISTS idx_users_chat ON users (chat_id)")
            await db.execute("CREATE INDEX IF NOT EXISTS idx_bans_user_chat ON bans (user_id, chat_id)")
            await db.commit()

    async def ensure_user(self, user_id: int, chat_id: int, role: str = ROLE_USER) -> None:
        async with self._connect() as db:
            await db.execute(
                "INSERT OR IGNORE INTO users (user_id, chat_id, role) VALUES (?, ?, ?)",
                (int(user_id), int(chat_id or 0), role),
            )
            await db.commit()

    async def get_user(self, user_id: int, chat_id: int) -> UserRecord | None:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT user_id, chat_id, warns, banned, is_global, role FROM users WHERE user_id = ? AND chat_id = ?",
                (int(user_id), int(chat_id or 0)),
            )
            row = await cursor.fetchone()
        if not row:
            return None
        return UserRecord(
            user_id=int(row[0]),
            chat_id=int(row[1]),
            warns=int(row[2] or 0),
            banned=bool(row[3]),
            is_global=bool(row[4]),
            role=str(row[5] or ROLE_USER),
        )

    async def add_warn(self, user_id: int, chat_id: int) -> int:
        key_chat = int(chat_id)
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO users (user_id, chat_id, warns) VALUES (?, ?, 1) "
                "ON CONFLICT (user_id, chat_id) DO UPDATE SET warns = users.warns + 1",
                (int(user_id), key_chat),
            )
            cursor = await db.execute(
                "SELECT warns FROM users WHERE user_id = ? AND chat_id = ?",
                (int(user_id), key_chat),
            )
            row = await cursor.fetchone()
            await db.commit()
        return int(row[0]) if row else 0

    async def ban_user(self, user_id: int, chat_id: int, *, is_global: bool = False, reason: str = "") -> None:
        key_chat = GLOBAL_CHAT_ID if is_global else int(chat_id)
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO users (user_id, chat_id, banned, is_global) VALUES (?, ?, 1, ?) "
                "ON CONFLICT (user_id, chat_id) DO UPDATE SET banned = 1",
                (int(user_id), key_chat, int(is_global)),
            )
            await db.execute(
                "INSERT INTO bans (user_id, chat_id, reason, banned_at, is_global) VALUES (?, ?, ?, ?, ?)",
                (int(user_id), key_chat, reason or "", _utc_now(), int(is_global)),
            )
            await db.commit()

    async def unban_user(self, user_id: int, chat_id: int, *, is_global: bool = False) -> bool:
        key_chat = GLOBAL_CHAT_ID if is_global else int(chat_id)
        async with self._connect() as db:
            cursor = await db.execute(
                "UPDATE users SET banned = 0 WHERE user_id = ? AND chat_id = ? AND banned = 1",
                (int(user_id), key_chat),
            )
            await db.commit()
            return (cursor.rowcount or 0) > 0

    async def record_kick(self, user_id: int, chat_id: int, reason: str = "") -> None:
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO bans (user_id, chat_id, reason, banned_at, is_global) VALUES (?, ?, ?, ?, 0)",
                (int(user_id), int(chat_id), reason or "", _utc_now()),
            )
            await db.commit()

    async def set_role(self, user_id: int, chat_id: int, role: str) -> None:
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO users (user_id, chat_id, role) VALUES (?, ?, ?) "
                "ON CONFLICT (user_id, chat_id) DO UPDATE SET role = excluded.role",
                (int(user_id), int(chat_id), role),
            )
            await db.commit()

    async def is_group_registered(self, chat_id: int) -> bool:
        async with self._connect() as db:
            cursor = await db.execute("SELECT 1 FROM groups WHERE chat_id = ?", (int(chat_id),))
            row = await cursor.fetchone()
        return row is not None

    async def upsert_group(self, chat_id: int, title: str, members_count: int) -> None:
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO groups (chat_id, title, members_count) VALUES (?, ?, ?) "
                "ON CONFLICT (chat_id) DO UPDATE SET title = excluded.title, members_count = excluded.members_count",
                (int(chat_id), title, int(members_count or 0)),
            )
            await db.commit()

    async def get_chat_stats(self, chat_id: int) -> ChatStats:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT COUNT(*), COALESCE(SUM(banned), 0), COALESCE(SUM(warns), 0) FROM users WHERE chat_id = ?",
                (int(chat_id),),
            )
            row = await cursor.fetchone()
        if not row:
            return ChatStats()
        return ChatStats(members=int(row[0] or 0), banned=int(row[1] or 0), warns=int(row[2] or 0))
