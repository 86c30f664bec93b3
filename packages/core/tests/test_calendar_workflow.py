"""日历关联流程测试

测试内容：
1. 完整流程：选择日历 → 日期 → 时间 → 提交，任务只写入事件 ID
2. 中途取消不产生外部副作用
3. 权限拒绝 / 日历不可用 / 事件创建失败
4. 调用顺序错误抛出 InvalidTransitionError
5. 提交被取消时流程仍回到 IDLE
"""

import asyncio
from datetime import UTC, date, datetime, time, timedelta, timezone

import pytest
from notekeeper.core.adapters import MemoryCalendar
from notekeeper.core.calendar import CalendarAccess, CalendarLinkWorkflow, combine_start
from notekeeper.core.exceptions import InvalidTransitionError
from notekeeper.core.models import CalendarInfo, LinkState, LinkStatus
from notekeeper.core.repositories import TaskRepository


async def _new_task(tasks: TaskRepository, title: str = "Dentist appointment"):
    result = await tasks.create(title)
    return tasks.get(result.target_id)


async def _walk_to_time_picked(workflow: CalendarLinkWorkflow, task, calendar_id: str = "cal-1"):
    assert (await workflow.begin(task)).status == LinkStatus.READY
    workflow.select_calendar(calendar_id)
    workflow.pick_date(date(2025, 6, 2))
    workflow.pick_time(time(14, 30))


class TestCombineStart:
    def test_naive_time_is_utc(self):
        assert combine_start(date(2025, 6, 2), time(14, 30, 59)) == datetime(
            2025, 6, 2, 14, 30, tzinfo=UTC
        )

    def test_keeps_time_zone(self):
        tz = timezone(timedelta(hours=8))
        start = combine_start(date(2025, 6, 2), time(9, 0, tzinfo=tz))
        assert start.utcoffset() == timedelta(hours=8)


class TestLinkHappyPath:
    """完整关联流程"""

    async def test_commit_links_task(self, workflow, tasks, memory_calendar: MemoryCalendar):
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        assert workflow.state == LinkState.TIME_PICKED

        result = await workflow.commit()

        assert result.status == LinkStatus.LINKED
        assert result.state == LinkState.IDLE
        assert workflow.state == LinkState.IDLE
        assert workflow.target is None

        stored = memory_calendar.events[result.event_id]
        assert stored.calendar_id == "cal-1"
        assert stored.request.title == "Dentist appointment"
        assert stored.request.start == datetime(2025, 6, 2, 14, 30, tzinfo=UTC)
        assert stored.request.end - stored.request.start == timedelta(hours=1)
        assert stored.request.reminder_offset_minutes == 30
        assert stored.request.note == "Task from Notes App"

    async def test_only_event_id_written(self, workflow, tasks, flaky_store):
        """成功提交恰好写一次任务，其余字段保持不变"""
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        saves_before = len(flaky_store.save_calls)

        result = await workflow.commit()

        assert len(flaky_store.save_calls) == saves_before + 1
        linked = tasks.get(task.id)
        assert linked.calendar_event_id == result.event_id
        assert linked.model_copy(update={"calendar_event_id": None}) == task

    async def test_relink_overwrites_event_id(self, workflow, tasks, memory_calendar):
        """重新关联覆盖旧 ID，旧事件仍留在外部日历中"""
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        first = (await workflow.commit()).event_id

        await _walk_to_time_picked(workflow, tasks.get(task.id), calendar_id="cal-2")
        second = (await workflow.commit()).event_id

        assert first != second
        assert tasks.get(task.id).calendar_event_id == second
        assert set(memory_calendar.events) == {first, second}

    async def test_custom_event_settings(self, calendar_access, tasks, memory_calendar):
        workflow = CalendarLinkWorkflow(
            calendar_access,
            tasks,
            event_duration=timedelta(minutes=15),
            reminder_offset_minutes=5,
            event_note="custom",
        )
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        event_id = (await workflow.commit()).event_id

        request = memory_calendar.events[event_id].request
        assert request.end - request.start == timedelta(minutes=15)
        assert request.reminder_offset_minutes == 5
        assert request.note == "custom"


class TestLinkCancel:
    """取消流程"""

    @pytest.mark.parametrize("steps", [0, 1, 2, 3])
    async def test_cancel_leaves_no_side_effects(
        self, workflow, tasks, memory_calendar, flaky_store, steps: int
    ):
        """任一中间状态取消：无外部事件，任务不变，回到 IDLE"""
        task = await _new_task(tasks)
        saves_before = len(flaky_store.save_calls)
        await workflow.begin(task)
        if steps >= 1:
            workflow.select_calendar("cal-1")
        if steps >= 2:
            workflow.pick_date(date(2025, 6, 2))
        if steps >= 3:
            workflow.pick_time(time(9, 0))

        result = workflow.cancel()

        assert result.status == LinkStatus.CANCELLED
        assert workflow.state == LinkState.IDLE
        assert workflow.target is None
        assert workflow.start is None
        assert memory_calendar.events == {}
        assert tasks.get(task.id) == task
        assert len(flaky_store.save_calls) == saves_before

    async def test_begin_again_after_cancel(self, workflow, tasks):
        task = await _new_task(tasks)
        await workflow.begin(task)
        workflow.select_calendar("cal-1")
        workflow.cancel()
        assert (await workflow.begin(task)).status == LinkStatus.READY


class TestLinkFailures:
    """失败路径"""

    async def test_permission_denied(self, tasks):
        access = CalendarAccess(MemoryCalendar(grant=False))
        await access.request_permission()
        workflow = CalendarLinkWorkflow(access, tasks)
        task = await _new_task(tasks)

        result = await workflow.begin(task)

        assert result.status == LinkStatus.PERMISSION_DENIED
        assert workflow.state == LinkState.IDLE
        assert workflow.target is None

    async def test_no_calendars(self, tasks):
        access = CalendarAccess(MemoryCalendar(calendars=[]))
        await access.request_permission()
        workflow = CalendarLinkWorkflow(access, tasks)

        result = await workflow.begin(await _new_task(tasks))

        assert result.status == LinkStatus.CALENDAR_UNAVAILABLE

    async def test_unknown_calendar_keeps_state(self, workflow, tasks):
        await workflow.begin(await _new_task(tasks))
        result = workflow.select_calendar("nope")
        assert result.status == LinkStatus.CALENDAR_UNAVAILABLE
        assert workflow.state == LinkState.IDLE

    async def test_event_failure_leaves_task(self, workflow, tasks, memory_calendar, flaky_store):
        """事件创建失败：任务不变，流程回到 IDLE"""
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        memory_calendar.fail_next = RuntimeError("calendar offline")
        saves_before = len(flaky_store.save_calls)

        result = await workflow.commit()

        assert result.status == LinkStatus.EVENT_FAILED
        assert "calendar offline" in result.error
        assert workflow.state == LinkState.IDLE
        assert tasks.get(task.id).calendar_event_id is None
        assert len(flaky_store.save_calls) == saves_before

    async def test_task_deleted_mid_flow(self, workflow, tasks, memory_calendar):
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        await tasks.delete(task.id)

        result = await workflow.commit()

        assert result.status == LinkStatus.TASK_NOT_FOUND
        assert result.event_id in memory_calendar.events
        assert workflow.state == LinkState.IDLE

    async def test_task_persist_failure(self, workflow, tasks, flaky_store):
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)
        flaky_store.fail_saves = True

        result = await workflow.commit()

        assert result.status == LinkStatus.PERSIST_FAILED
        assert tasks.get(task.id).calendar_event_id == result.event_id
        assert tasks.is_caught_up is False


class TestLinkOrdering:
    """调用顺序错误"""

    async def test_select_before_begin(self, workflow):
        with pytest.raises(InvalidTransitionError):
            workflow.select_calendar("cal-1")

    async def test_pick_time_before_date(self, workflow, tasks):
        await workflow.begin(await _new_task(tasks))
        workflow.select_calendar("cal-1")
        with pytest.raises(InvalidTransitionError):
            workflow.pick_time(time(9, 0))
        assert workflow.state == LinkState.CALENDAR_SELECTED

    async def test_commit_before_time(self, workflow, tasks):
        await workflow.begin(await _new_task(tasks))
        workflow.select_calendar("cal-1")
        workflow.pick_date(date(2025, 6, 2))
        with pytest.raises(InvalidTransitionError):
            await workflow.commit()

    async def test_second_flow_rejected(self, workflow, tasks):
        """同一时间只允许一个进行中的流程"""
        task = await _new_task(tasks)
        await workflow.begin(task)
        workflow.select_calendar("cal-1")
        with pytest.raises(InvalidTransitionError):
            await workflow.begin(task)


class TestCalendarAccess:
    """权限缓存"""

    async def test_permission_requested_once(self, memory_calendar):
        access = CalendarAccess(memory_calendar)
        assert access.requested is False
        await access.request_permission()
        await access.request_permission()
        assert memory_calendar.permission_requests == 1
        assert access.granted is True

    async def test_permission_error_counts_as_denied(self):
        class BrokenCalendar(MemoryCalendar):
            async def request_permission(self) -> bool:
                raise OSError("no calendar service")

        access = CalendarAccess(BrokenCalendar())
        assert await access.request_permission() is False
        assert access.requested is True


class StalledCalendar(MemoryCalendar):
    """create_event 挂起直到被取消"""

    def __init__(self) -> None:
        super().__init__(calendars=[CalendarInfo(id="cal-1", name="Personal")])
        self.entered = asyncio.Event()

    async def create_event(self, calendar_id, request) -> str:
        self.entered.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


class TestLinkInterrupted:
    """提交过程中调用被取消"""

    async def test_cancelled_commit_returns_to_idle(self, tasks):
        calendar = StalledCalendar()
        access = CalendarAccess(calendar)
        await access.request_permission()
        workflow = CalendarLinkWorkflow(access, tasks)
        task = await _new_task(tasks)
        await _walk_to_time_picked(workflow, task)

        pending = asyncio.create_task(workflow.commit())
        await calendar.entered.wait()
        assert workflow.state == LinkState.COMMITTED
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

        assert workflow.state == LinkState.IDLE
        assert workflow.target is None
        assert tasks.get(task.id).calendar_event_id is None
        assert workflow.cancel().status == LinkStatus.CANCELLED
        assert (await workflow.begin(task)).status == LinkStatus.READY
