"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、导出/临时文件目录、日历事件时长与提醒偏移等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("NOTEKEEPER_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "NOTEKEEPER_DB_PATH",
        str(_get_base_dir() / "sqlite" / "notekeeper.db"),
    )


def get_export_dir() -> Path:
    """获取全量导出文件目录（导出文件交给用户保留，不清理）"""
    return Path(
        os.environ.get(
            "NOTEKEEPER_EXPORT_DIR",
            str(_get_base_dir() / "exports"),
        )
    )


def get_cache_dir() -> Path:
    """获取临时文件目录（单条笔记分享后即删除）"""
    return Path(
        os.environ.get(
            "NOTEKEEPER_CACHE_DIR",
            str(_get_base_dir() / "cache"),
        )
    )


def get_outbox_dir() -> Path:
    """获取本地分享出口目录"""
    return Path(
        os.environ.get(
            "NOTEKEEPER_OUTBOX_DIR",
            str(_get_base_dir() / "outbox"),
        )
    )


# 日历事件时长（分钟），开始时间 + 此值 = 结束时间
EVENT_DURATION_MINUTES: int = int(
    os.environ.get("NOTEKEEPER_EVENT_DURATION_MINUTES", "60")
)

# 提醒提前量（分钟）
REMINDER_OFFSET_MINUTES: int = int(
    os.environ.get("NOTEKEEPER_REMINDER_OFFSET_MINUTES", "30")
)

# 外部日历事件的固定备注
CALENDAR_EVENT_NOTE: str = "Task from Notes App"

# 分类初始值
DEFAULT_CATEGORIES: tuple[str, ...] = ("Personal", "Work", "Shopping", "Ideas")

# 主题默认值
DEFAULT_THEME: str = "default"

# 导出/分享文件名
EXPORT_FILE_NAME: str = "notes_backup.json"
SHARE_FILE_NAME: str = "note.txt"


def get_collation_locale() -> str:
    """获取标题/分类排序使用的 LC_COLLATE

    默认 "" 表示沿用宿主环境（LANG / LC_ALL）的区域设置。
    """
    return os.environ.get("NOTEKEEPER_LOCALE", "")
