"""SQLite credential store."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from .accounts.base import RememberedLogin, UserRecord, UserRepository
from .config import settings

logger = logging.getLogger(__name__)


class SqliteUserRepository(UserRepository):
    """User records and the remembered login pair in a local SQLite file."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self.db_path = Path(db_path or settings.db_path)

    async def init_db(self) -> None:
        """Create tables; a store that cannot be read is moved aside and recreated."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await self._create_tables()
        except sqlite3.DatabaseError as e:
            backup = self.db_path.with_name(
                f"{self.db_path.name}.corrupt-{datetime.now(timezone.utc):%Y%m%d%H%M%S}"
            )
            logger.warning(f"Credential store {self.db_path} is unreadable ({e}); moving to {backup}")
            self.db_path.replace(backup)
            await self._create_tables()

        logger.info(f"Database initialized at {self.db_path}")

    async def _create_tables(self) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    username TEXT PRIMARY KEY,
                    password TEXT NOT NULL,
                    active INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            # Single-row table holding the "remember me" pair
            await db.execute("""
                CREATE TABLE IF NOT EXISTS remembered_login (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    username TEXT NOT NULL,
                    password TEXT NOT NULL
                )
            """)

            await db.commit()

            # Existing tables must carry the expected columns
            async with db.execute(
                "SELECT username, password, active, created_at FROM users LIMIT 1"
            ) as cursor:
                await cursor.fetchone()
            async with db.execute(
                "SELECT id, username, password FROM remembered_login LIMIT 1"
            ) as cursor:
                await cursor.fetchone()

    async def get(self, username: str) -> UserRecord | None:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT username, password, active FROM users WHERE username = ?",
                (username,),
            ) as cursor:
                row = await cursor.fetchone()
                if row is None:
                    return None
                return UserRecord(
                    username=row["username"],
                    password=row["password"],
                    active=bool(row["active"]),
                )

    async def put(self, user: UserRecord) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO users (username, password, active)
                VALUES (?, ?, ?)
                ON CONFLICT(username) DO UPDATE SET
                    password = excluded.password,
                    active = excluded.active
                """,
                (user.username, user.password, int(user.active)),
            )
            await db.commit()

    async def delete(self, username: str) -> bool:
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM users WHERE username = ?", (username,))
            await db.commit()
            return cursor.rowcount > 0

    async def list(self) -> list[UserRecord]:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT username, password, active FROM users ORDER BY created_at, username"
            ) as cursor:
                rows = await cursor.fetchall()
                return [
                    UserRecord(
                        username=row["username"],
                        password=row["password"],
                        active=bool(row["active"]),
                    )
                    for row in rows
                ]

    async def get_remembered(self) -> RememberedLogin | None:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT username, password FROM remembered_login WHERE id = 1"
            ) as cursor:
                row = await cursor.fetchone()
                if row is None:
                    return None
                return RememberedLogin(username=row["username"], password=row["password"])

    async def set_remembered(self, login: RememberedLogin) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT OR REPLACE INTO remembered_login (id, username, password) VALUES (1, ?, ?)",
                (login.username, login.password),
            )
            await db.commit()

    async def clear_remembered(self) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM remembered_login")
            await db.commit()
