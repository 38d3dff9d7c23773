"""SQLite token registry — local stand-in for the device_tokens collection."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypedDict

import aiosqlite

from autocenter_events.envelope import RecipientQuery, RecipientToken


class DeviceTokenRow(TypedDict):
    token: str
    role: str
    username: str | None
    platform: str
    updated_at: str


_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS device_tokens (
    token TEXT PRIMARY KEY,
    role TEXT NOT NULL,
    username TEXT,
    platform TEXT NOT NULL DEFAULT 'web_pwa',
    updated_at TEXT NOT NULL
);
"""

_CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_device_tokens_role ON device_tokens (role);",
    "CREATE INDEX IF NOT EXISTS idx_device_tokens_username ON device_tokens (username);",
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_token(row: aiosqlite.Row) -> RecipientToken:
    return RecipientToken(token=row["token"], role=row["role"], username=row["username"], platform=row["platform"])


class SqliteTokenRegistry:
    def __init__(self, db_path: str | Path = "~/.autocenter/device_tokens.db") -> None:
        self._db_path = Path(db_path).expanduser()
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(str(self._db_path))
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL;")
        await self._conn.execute(_CREATE_TABLE)
        for idx_sql in _CREATE_INDEXES:
            await self._conn.execute(idx_sql)
        await self._conn.commit()

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _db(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("SqliteTokenRegistry not initialized. Call init() first.")
        return self._conn

    async def query(self, query: RecipientQuery) -> list[RecipientToken]:
        if not query.roles:
            return []
        conditions = [f"role IN ({', '.join('?' for _ in query.roles)})"]
        params: list[Any] = list(query.roles)
        if query.username is not None:
            conditions.append("username = ?")
            params.append(query.username)

        cursor = await self._db().execute(
            f"SELECT * FROM device_tokens WHERE {' AND '.join(conditions)} ORDER BY rowid",
            params,
        )
        rows = await cursor.fetchall()
        return [_row_to_token(r) for r in rows]

    async def delete(self, token: str) -> None:
        await self._db().execute("DELETE FROM device_tokens WHERE token = ?", (token,))
        await self._db().commit()

    async def upsert(self, token: RecipientToken) -> None:
        """Insert or refresh a token; re-registration always wins over an earlier delete."""
        await self._db().execute(
            """
            INSERT INTO device_tokens (token, role, username, platform, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(token) DO UPDATE SET
              role = excluded.role,
              username = excluded.username,
              platform = excluded.platform,
              updated_at = excluded.updated_at
            """,
            (token.token, token.role, token.username, token.platform, _now_iso()),
        )
        await self._db().commit()

    async def get(self, token: str) -> RecipientToken | None:
        cursor = await self._db().execute("SELECT * FROM device_tokens WHERE token = ?", (token,))
        row = await cursor.fetchone()
        return _row_to_token(row) if row else None

    async def list_all(self) -> list[DeviceTokenRow]:
        cursor = await self._db().execute("SELECT * FROM device_tokens ORDER BY role, username, token")
        rows = await cursor.fetchall()
        return [dict(r) for r in rows]  # type: ignore[misc]
