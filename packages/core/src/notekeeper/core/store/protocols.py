"""Store 与外部协作方 Protocol 接口定义

使用 Python Protocol 实现结构化子类型（duck typing），
测试与本地模式均可替换任意实现。
"""

from pathlib import Path
from typing import Protocol

from ..models.calendar import CalendarEventRequest, CalendarInfo


class DurableStore(Protocol):
    """键值快照存储接口"""

    async def load(self, key: str) -> str | None:
        """读取键对应的文本，不存在时返回 None"""
        ...

    async def save(self, key: str, text: str) -> None:
        """写入键对应的文本，失败时抛出 PersistenceError 且旧值不变"""
        ...


class CalendarProvider(Protocol):
    """外部日历接口（core 从不回读事件状态）"""

    async def request_permission(self) -> bool:
        """请求日历权限，返回是否授予"""
        ...

    async def list_calendars(self) -> list[CalendarInfo]:
        """列出权限范围内的日历"""
        ...

    async def create_event(
        self,
        calendar_id: str,
        request: CalendarEventRequest,
    ) -> str:
        """创建事件，返回外部事件 ID"""
        ...


class SharingProvider(Protocol):
    """平台分享接口"""

    async def is_available(self) -> bool:
        """当前平台是否支持分享"""
        ...

    async def share(self, path: Path, mime_type: str, title: str) -> None:
        """分享文件"""
        ...


class TransientFileSystem(Protocol):
    """临时文件系统接口"""

    async def write_text(self, path: Path, content: str) -> None:
        """写入文本文件"""
        ...

    async def delete_file(self, path: Path) -> None:
        """删除文件"""
        ...
