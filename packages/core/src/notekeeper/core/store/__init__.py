"""Notekeeper Core Store -- SQLite 持久化实现

提供工厂函数打开已初始化的键值存储。
"""

from pathlib import Path

import aiosqlite

from .codec import (
    decode_names,
    decode_notes,
    decode_tasks,
    encode_names,
    encode_notes,
    encode_tasks,
)
from .kv_store import (
    CATEGORIES_KEY,
    NOTES_KEY,
    TASKS_KEY,
    THEME_KEY,
    SqliteKeyValueStore,
)
from .protocols import CalendarProvider, DurableStore, SharingProvider, TransientFileSystem
from .sqlite_init import init_db


async def open_store(db_path: str) -> SqliteKeyValueStore:
    """打开键值存储

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        SqliteKeyValueStore 实例（调用方负责关闭 store.conn）
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return SqliteKeyValueStore(conn)


__all__ = [
    "open_store",
    "SqliteKeyValueStore",
    "DurableStore",
    "CalendarProvider",
    "SharingProvider",
    "TransientFileSystem",
    "init_db",
    "NOTES_KEY",
    "TASKS_KEY",
    "CATEGORIES_KEY",
    "THEME_KEY",
    "encode_notes",
    "decode_notes",
    "encode_tasks",
    "decode_tasks",
    "encode_names",
    "decode_names",
]
