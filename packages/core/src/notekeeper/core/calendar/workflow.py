"""CalendarLinkWorkflow -- 任务关联外部日历事件的状态机

流程：
1. begin(task): 检查权限、获取可用日历，绑定目标任务（仍处于 IDLE）
2. select_calendar: IDLE -> CALENDAR_SELECTED
3. pick_date: CALENDAR_SELECTED -> DATE_PICKED
4. pick_time: DATE_PICKED -> TIME_PICKED
5. commit: TIME_PICKED -> COMMITTED，创建外部事件并写回 calendar_event_id，
   无论成功失败随后回到 IDLE

中间任一状态 cancel() 丢弃所有选择并回到 IDLE，不触碰任务。
外部事件只在 commit 中创建，取消不会留下任何外部副作用。
重新关联会覆盖旧的事件 ID，旧事件不会被删除或更新。
"""

from datetime import UTC, date, datetime, time, timedelta

import structlog

from .. import config
from ..exceptions import (
    CalendarPermissionError,
    CalendarUnavailableError,
    EventCreationError,
    InvalidTransitionError,
)
from ..models.calendar import CalendarEventRequest, CalendarInfo
from ..models.enums import (
    CANCELLABLE_STATES,
    LinkState,
    LinkStatus,
    MutationStatus,
    validate_link_transition,
)
from ..models.results import LinkResult
from ..models.task import Task
from ..repositories.task_repository import TaskRepository
from .access import CalendarAccess

log = structlog.get_logger()


def combine_start(day: date, at: time) -> datetime:
    """合并日期与时间（精确到分钟）；不带时区的时间按 UTC 解释"""
    return datetime.combine(
        day,
        time(at.hour, at.minute),
        tzinfo=at.tzinfo or UTC,
    )


class CalendarLinkWorkflow:
    """日历关联流程（同一时间只有一个活动流程）"""

    def __init__(
        self,
        access: CalendarAccess,
        tasks: TaskRepository,
        event_duration: timedelta = timedelta(minutes=config.EVENT_DURATION_MINUTES),
        reminder_offset_minutes: int = config.REMINDER_OFFSET_MINUTES,
        event_note: str = config.CALENDAR_EVENT_NOTE,
    ) -> None:
        self._access = access
        self._tasks = tasks
        self._event_duration = event_duration
        self._reminder_offset_minutes = reminder_offset_minutes
        self._event_note = event_note
        self._reset()

    @property
    def state(self) -> LinkState:
        return self._state

    @property
    def target(self) -> Task | None:
        """正在关联的任务（流程结束或取消后释放）"""
        return self._target

    @property
    def calendars(self) -> tuple[CalendarInfo, ...]:
        return self._calendars

    @property
    def selected_calendar(self) -> CalendarInfo | None:
        return self._calendar

    @property
    def start(self) -> datetime | None:
        if self._date is None or self._time is None:
            return None
        return combine_start(self._date, self._time)

    async def begin(self, task: Task) -> LinkResult:
        """以 task 为目标开始流程

        Raises:
            InvalidTransitionError: 已有流程在进行中
        """
        if self._state != LinkState.IDLE:
            raise InvalidTransitionError(self._state, LinkState.IDLE)

        try:
            calendars = await self._access.list_calendars()
        except CalendarPermissionError as e:
            log.info("calendar_link_permission_denied", task_id=task.id)
            return self._result(LinkStatus.PERMISSION_DENIED, error=str(e))
        except CalendarUnavailableError as e:
            return self._result(LinkStatus.CALENDAR_UNAVAILABLE, error=str(e))

        if not calendars:
            return self._result(LinkStatus.CALENDAR_UNAVAILABLE, error="没有可用的日历")

        self._target = task
        self._calendars = tuple(calendars)
        log.info("calendar_link_started", task_id=task.id, calendar_count=len(calendars))
        return self._result(LinkStatus.READY)

    def select_calendar(self, calendar_id: str) -> LinkResult:
        """选择日历：IDLE -> CALENDAR_SELECTED"""
        if self._target is None:
            raise InvalidTransitionError(self._state, LinkState.CALENDAR_SELECTED)
        calendar = next((c for c in self._calendars if c.id == calendar_id), None)
        if calendar is None:
            return self._result(
                LinkStatus.CALENDAR_UNAVAILABLE,
                error=f"日历不在可选范围内: {calendar_id}",
            )
        self._transition(LinkState.CALENDAR_SELECTED)
        self._calendar = calendar
        return self._result(LinkStatus.READY)

    def pick_date(self, day: date) -> LinkResult:
        """选择日期：CALENDAR_SELECTED -> DATE_PICKED"""
        self._transition(LinkState.DATE_PICKED)
        self._date = day
        return self._result(LinkStatus.READY)

    def pick_time(self, at: time) -> LinkResult:
        """选择时间：DATE_PICKED -> TIME_PICKED"""
        self._transition(LinkState.TIME_PICKED)
        self._time = at
        return self._result(LinkStatus.READY)

    async def commit(self) -> LinkResult:
        """TIME_PICKED -> COMMITTED：创建外部事件并写回任务

        成功时恰好调用一次 set_calendar_event_id；失败时任务保持不变。
        无论结果如何（包括调用被取消），流程都回到 IDLE。
        """
        self._transition(LinkState.COMMITTED)
        try:
            return await self._create_and_link()
        finally:
            if self._state == LinkState.COMMITTED:
                log.warning(
                    "calendar_link_interrupted",
                    task_id=self._target.id if self._target else None,
                )
                self._finish()

    async def _create_and_link(self) -> LinkResult:
        # 能到达 COMMITTED 说明目标、日历与日期时间均已选择
        task: Task = self._target
        calendar: CalendarInfo = self._calendar
        start: datetime = self.start

        request = CalendarEventRequest(
            title=task.title,
            start=start,
            end=start + self._event_duration,
            reminder_offset_minutes=self._reminder_offset_minutes,
            note=self._event_note,
        )

        try:
            event_id = await self._access.create_event(calendar.id, request)
        except (EventCreationError, CalendarPermissionError) as e:
            log.error(
                "calendar_event_create_failed",
                task_id=task.id,
                calendar_id=calendar.id,
                error_type=type(e).__name__,
            )
            self._finish()
            return self._result(LinkStatus.EVENT_FAILED, error=str(e))

        if task.calendar_event_id:
            # 旧事件不做清理
            log.info(
                "calendar_link_replaced",
                task_id=task.id,
                previous_event_id=task.calendar_event_id,
            )

        mutation = await self._tasks.set_calendar_event_id(task.id, event_id)
        self._finish()

        if mutation.status == MutationStatus.NOT_FOUND:
            log.warning("calendar_link_task_missing", task_id=task.id, event_id=event_id)
            return self._result(
                LinkStatus.TASK_NOT_FOUND,
                event_id=event_id,
                error="任务已被删除，外部事件未关联",
            )
        if mutation.status == MutationStatus.PERSIST_FAILED:
            return self._result(
                LinkStatus.PERSIST_FAILED,
                event_id=event_id,
                error=mutation.error,
            )
        return self._result(LinkStatus.LINKED, event_id=event_id)

    def cancel(self) -> LinkResult:
        """取消流程，丢弃所有选择，不触碰任务

        Raises:
            InvalidTransitionError: 流程正在提交中
        """
        if self._state == LinkState.COMMITTED:
            raise InvalidTransitionError(self._state, LinkState.IDLE)
        if self._state in CANCELLABLE_STATES:
            self._transition(LinkState.IDLE)
        if self._target is not None:
            log.info("calendar_link_cancelled", task_id=self._target.id)
        self._reset()
        return self._result(LinkStatus.CANCELLED)

    def _transition(self, to_state: LinkState) -> None:
        if not validate_link_transition(self._state, to_state):
            raise InvalidTransitionError(self._state, to_state)
        self._state = to_state

    def _finish(self) -> None:
        """COMMITTED -> IDLE 并释放目标任务"""
        self._transition(LinkState.IDLE)
        self._reset()

    def _reset(self) -> None:
        self._state = LinkState.IDLE
        self._target: Task | None = None
        self._calendars: tuple[CalendarInfo, ...] = ()
        self._calendar: CalendarInfo | None = None
        self._date: date | None = None
        self._time: time | None = None

    def _result(
        self,
        status: LinkStatus,
        event_id: str | None = None,
        error: str = "",
    ) -> LinkResult:
        return LinkResult(status=status, state=self._state, event_id=event_id, error=error)
