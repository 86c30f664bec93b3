"""本地协作方实现

平台日历 / 分享 / 临时文件系统的 Python 本地替代：
- LocalFileSystem: pathlib 读写
- MemoryCalendar: 内存日历，事件 ID 使用 ULID
- OutboxSharing: 把分享文件复制到出口目录
- UnavailableSharing: 不支持分享的平台

本地模式与测试均使用这些实现。
"""

import shutil
from pathlib import Path

import structlog
from pydantic import BaseModel
from ulid import ULID

from .exceptions import TransientFileError
from .models.calendar import CalendarEventRequest, CalendarInfo

log = structlog.get_logger()


class LocalFileSystem:
    """基于 pathlib 的临时文件系统"""

    async def write_text(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise TransientFileError(str(path), e) from e

    async def delete_file(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise TransientFileError(str(path), e) from e


class StoredEvent(BaseModel):
    """MemoryCalendar 中保存的事件"""

    event_id: str
    calendar_id: str
    request: CalendarEventRequest


class MemoryCalendar:
    """内存日历

    Args:
        calendars: 可用日历，默认提供一个 "Personal" 日历
        grant: request_permission 的返回值
    """

    def __init__(
        self,
        calendars: list[CalendarInfo] | None = None,
        grant: bool = True,
    ) -> None:
        self._calendars = (
            list(calendars)
            if calendars is not None
            else [CalendarInfo(id="local-personal", name="Personal")]
        )
        self._grant = grant
        self.permission_requests = 0
        self.events: dict[str, StoredEvent] = {}
        # 设置后下一次 create_event 抛出该异常
        self.fail_next: Exception | None = None

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self._grant

    async def list_calendars(self) -> list[CalendarInfo]:
        return list(self._calendars)

    async def create_event(self, calendar_id: str, request: CalendarEventRequest) -> str:
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error
        if not any(c.id == calendar_id for c in self._calendars):
            raise LookupError(f"calendar not found: {calendar_id}")
        event_id = str(ULID())
        self.events[event_id] = StoredEvent(
            event_id=event_id,
            calendar_id=calendar_id,
            request=request,
        )
        log.debug("memory_calendar_event_created", event_id=event_id, calendar_id=calendar_id)
        return event_id


class OutboxSharing:
    """把分享的文件复制到出口目录"""

    def __init__(self, outbox_dir: Path) -> None:
        self._outbox_dir = outbox_dir
        self.shared: list[tuple[Path, str, str]] = []

    async def is_available(self) -> bool:
        return True

    async def share(self, path: Path, mime_type: str, title: str) -> None:
        self._outbox_dir.mkdir(parents=True, exist_ok=True)
        target = self._outbox_dir / f"{ULID()}-{path.name}"
        shutil.copy2(path, target)
        self.shared.append((target, mime_type, title))


class UnavailableSharing:
    """不支持分享的平台"""

    async def is_available(self) -> bool:
        return False

    async def share(self, path: Path, mime_type: str, title: str) -> None:
        raise RuntimeError("sharing is not available on this platform")
