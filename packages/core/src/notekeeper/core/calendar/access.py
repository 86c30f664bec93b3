"""CalendarAccess -- 外部日历权限与调用封装

权限只在会话启动时请求一次并缓存；未授予时所有日历操作
抛出 CalendarPermissionError，由上层转换为结果值。
"""

import structlog

from ..exceptions import (
    CalendarPermissionError,
    CalendarUnavailableError,
    EventCreationError,
)
from ..models.calendar import CalendarEventRequest, CalendarInfo
from ..store.protocols import CalendarProvider

log = structlog.get_logger()


class CalendarAccess:
    """外部日历访问"""

    def __init__(self, provider: CalendarProvider) -> None:
        self._provider = provider
        self._granted: bool | None = None

    @property
    def granted(self) -> bool:
        return bool(self._granted)

    @property
    def requested(self) -> bool:
        return self._granted is not None

    async def request_permission(self) -> bool:
        """请求日历权限（仅首次调用会真正请求）"""
        if self._granted is not None:
            return self._granted
        try:
            self._granted = bool(await self._provider.request_permission())
        except Exception as e:
            # 平台权限接口异常视为拒绝，不影响会话启动
            log.warning("calendar_permission_error", error_type=type(e).__name__)
            self._granted = False
        log.info("calendar_permission_resolved", granted=self._granted)
        return self._granted

    async def list_calendars(self) -> list[CalendarInfo]:
        """列出权限范围内的日历

        Raises:
            CalendarPermissionError: 权限未授予
            CalendarUnavailableError: 日历服务不可用
        """
        if not self.granted:
            raise CalendarPermissionError()
        try:
            return list(await self._provider.list_calendars())
        except Exception as e:
            log.warning("calendar_list_failed", error_type=type(e).__name__)
            raise CalendarUnavailableError(f"日历列表不可用: {e}") from e

    async def create_event(self, calendar_id: str, request: CalendarEventRequest) -> str:
        """创建外部事件并返回非空事件 ID

        Raises:
            CalendarPermissionError: 权限未授予
            EventCreationError: 创建失败或返回空 ID
        """
        if not self.granted:
            raise CalendarPermissionError()
        try:
            event_id = await self._provider.create_event(calendar_id, request)
        except Exception as e:
            raise EventCreationError(calendar_id, e) from e
        if not event_id:
            raise EventCreationError(calendar_id, ValueError("空的事件 ID"))
        return event_id
