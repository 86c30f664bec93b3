"""Notekeeper Core Calendar -- 外部日历权限与任务关联流程"""

from .access import CalendarAccess
from .workflow import CalendarLinkWorkflow, combine_start

__all__ = [
    "CalendarAccess",
    "CalendarLinkWorkflow",
    "combine_start",
]
