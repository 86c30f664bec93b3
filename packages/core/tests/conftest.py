"""packages/core 测试配置 -- 核心层 fixture"""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from notekeeper.core.adapters import MemoryCalendar
from notekeeper.core.calendar import CalendarAccess, CalendarLinkWorkflow
from notekeeper.core.exceptions import PersistenceError
from notekeeper.core.models import CalendarInfo
from notekeeper.core.repositories import NoteRepository, TaskRepository


class StepClock:
    """每次调用前进固定步长的时钟"""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2025, 1, 1, 9, 0, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


class FlakyStore:
    """包装真实存储，可切换为写失败 / 读失败"""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.fail_saves = False
        self.fail_loads = False
        self.save_calls: list[str] = []

    async def load(self, key: str) -> str | None:
        if self.fail_loads:
            raise PersistenceError(key, "load", OSError("disk unreadable"))
        return await self._inner.load(key)

    async def save(self, key: str, text: str) -> None:
        self.save_calls.append(key)
        if self.fail_saves:
            raise PersistenceError(key, "save", OSError("disk full"))
        await self._inner.save(key, text)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest_asyncio.fixture
async def flaky_store(kv_store) -> FlakyStore:
    return FlakyStore(kv_store)


@pytest_asyncio.fixture
async def notes(flaky_store, clock) -> NoteRepository:
    repo = NoteRepository(flaky_store, clock=clock)
    await repo.load()
    return repo


@pytest_asyncio.fixture
async def tasks(flaky_store, clock) -> TaskRepository:
    repo = TaskRepository(flaky_store, clock=clock)
    await repo.load()
    return repo


@pytest.fixture
def memory_calendar() -> MemoryCalendar:
    return MemoryCalendar(
        calendars=[
            CalendarInfo(id="cal-1", name="Personal"),
            CalendarInfo(id="cal-2", name="Work"),
        ],
    )


@pytest_asyncio.fixture
async def calendar_access(memory_calendar) -> CalendarAccess:
    access = CalendarAccess(memory_calendar)
    await access.request_permission()
    return access


@pytest_asyncio.fixture
async def workflow(calendar_access, tasks) -> CalendarLinkWorkflow:
    return CalendarLinkWorkflow(calendar_access, tasks)
