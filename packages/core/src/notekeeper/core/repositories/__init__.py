"""Notekeeper Core Repositories -- 内存集合的唯一所有者"""

from .base import SnapshotRepository, utc_now
from .category_set import CategorySet
from .note_repository import NoteRepository
from .preferences import Preferences
from .task_repository import TaskRepository

__all__ = [
    "SnapshotRepository",
    "NoteRepository",
    "TaskRepository",
    "CategorySet",
    "Preferences",
    "utc_now",
]
