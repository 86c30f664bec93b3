"""Notekeeper Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .calendar import CalendarEventRequest, CalendarInfo
from .enums import (
    CANCELLABLE_STATES,
    LINK_TRANSITIONS,
    LinkState,
    LinkStatus,
    MutationStatus,
    ShareStatus,
    SortMode,
    TaskPriority,
    validate_link_transition,
)
from .note import Note, NoteDraft
from .results import LinkResult, MutationResult, ShareResult
from .task import Task

__all__ = [
    # 枚举
    "SortMode",
    "TaskPriority",
    "LinkState",
    "MutationStatus",
    "LinkStatus",
    "ShareStatus",
    # 状态机
    "LINK_TRANSITIONS",
    "CANCELLABLE_STATES",
    "validate_link_transition",
    # Note
    "Note",
    "NoteDraft",
    # Task
    "Task",
    # Calendar
    "CalendarInfo",
    "CalendarEventRequest",
    # Results
    "MutationResult",
    "LinkResult",
    "ShareResult",
]
