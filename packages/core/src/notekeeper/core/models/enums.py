"""枚举定义

包含排序方式、任务优先级、日历关联流程状态机（LINK_TRANSITIONS 合法流转映射）
以及各操作的结果状态。
"""

from enum import StrEnum


class SortMode(StrEnum):
    """笔记列表排序方式"""

    DATE_DESC = "DATE_DESC"
    DATE_ASC = "DATE_ASC"
    TITLE_ASC = "TITLE_ASC"
    TITLE_DESC = "TITLE_DESC"
    CATEGORY = "CATEGORY"
    FAVORITE = "FAVORITE"


class TaskPriority(StrEnum):
    """任务优先级（仅存储，不参与排序）"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LinkState(StrEnum):
    """日历关联流程状态机"""

    IDLE = "IDLE"
    CALENDAR_SELECTED = "CALENDAR_SELECTED"
    DATE_PICKED = "DATE_PICKED"
    TIME_PICKED = "TIME_PICKED"
    COMMITTED = "COMMITTED"


# 合法状态流转；COMMITTED 之后无论成功失败都回到 IDLE
LINK_TRANSITIONS: dict[LinkState, set[LinkState]] = {
    LinkState.IDLE: {LinkState.CALENDAR_SELECTED},
    LinkState.CALENDAR_SELECTED: {LinkState.DATE_PICKED, LinkState.IDLE},
    LinkState.DATE_PICKED: {LinkState.TIME_PICKED, LinkState.IDLE},
    LinkState.TIME_PICKED: {LinkState.COMMITTED, LinkState.IDLE},
    LinkState.COMMITTED: {LinkState.IDLE},
}

# 可被取消的中间状态
CANCELLABLE_STATES: set[LinkState] = {
    LinkState.CALENDAR_SELECTED,
    LinkState.DATE_PICKED,
    LinkState.TIME_PICKED,
}


class MutationStatus(StrEnum):
    """Repository 变更结果"""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    # 内存已变更，但落盘失败
    PERSIST_FAILED = "persist_failed"


class LinkStatus(StrEnum):
    """日历关联流程结果"""

    READY = "ready"
    LINKED = "linked"
    CANCELLED = "cancelled"
    PERMISSION_DENIED = "permission_denied"
    CALENDAR_UNAVAILABLE = "calendar_unavailable"
    EVENT_FAILED = "event_failed"
    # 事件已创建，但任务在流程进行中被删除
    TASK_NOT_FOUND = "task_not_found"
    # 事件已创建，但任务落盘失败
    PERSIST_FAILED = "persist_failed"


class ShareStatus(StrEnum):
    """导出/分享结果"""

    SHARED = "shared"
    SHARING_UNAVAILABLE = "sharing_unavailable"
    FAILED = "failed"


def validate_link_transition(from_state: LinkState, to_state: LinkState) -> bool:
    """验证日历关联流程状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = LINK_TRANSITIONS.get(from_state, set())
    return to_state in allowed
