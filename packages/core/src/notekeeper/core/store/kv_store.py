"""DurableStore SQLite 实现

键值快照存储：save 为单事务 upsert，失败时回滚，
load 永远只能看到完整的旧值或完整的新值。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog

from ..exceptions import PersistenceError

log = structlog.get_logger()

# 持久化布局中的固定键
NOTES_KEY = "notes"
TASKS_KEY = "tasks"
CATEGORIES_KEY = "categories"
THEME_KEY = "currentTheme"


class SqliteKeyValueStore:
    """DurableStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    @property
    def conn(self) -> aiosqlite.Connection:
        return self._conn

    async def load(self, key: str) -> str | None:
        """读取键对应的文本，不存在时返回 None

        Raises:
            PersistenceError: 数据库不可读
        """
        try:
            cursor = await self._conn.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,),
            )
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as e:
            log.warning("store_load_failed", key=key, error_type=type(e).__name__)
            raise PersistenceError(key, "load", e) from e
        return row[0] if row else None

    async def save(self, key: str, text: str) -> None:
        """写入键对应的文本（幂等 upsert）

        Raises:
            PersistenceError: 写入失败，事务已回滚
        """
        try:
            await self._conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, text, datetime.now(UTC).isoformat()),
            )
            await self._conn.commit()
        except (aiosqlite.Error, ValueError) as e:
            await self._safe_rollback()
            log.warning("store_save_failed", key=key, error_type=type(e).__name__)
            raise PersistenceError(key, "save", e) from e

    async def keys(self) -> list[str]:
        """列出已保存的所有键"""
        try:
            cursor = await self._conn.execute("SELECT key FROM kv_store ORDER BY key")
            rows = await cursor.fetchall()
        except (aiosqlite.Error, ValueError) as e:
            raise PersistenceError("*", "load", e) from e
        return [row[0] for row in rows]

    async def _safe_rollback(self) -> None:
        try:
            await self._conn.rollback()
        except (aiosqlite.Error, ValueError) as e:
            # 连接已失效时回滚本身也会失败；未提交的写入不会落盘
            log.warning("store_rollback_failed", error_type=type(e).__name__)
