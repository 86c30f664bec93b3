"""TaskRepository -- 任务集合的唯一所有者

set_calendar_event_id 是日历关联流程唯一允许的变更，
只更新这一个字段，其余字段原样保留。
"""

from collections.abc import Iterable

import structlog
from ulid import ULID

from ..models.enums import TaskPriority
from ..models.results import MutationResult
from ..models.task import Task
from ..store.codec import decode_tasks, encode_tasks
from ..store.kv_store import TASKS_KEY
from .base import SnapshotRepository

log = structlog.get_logger()


class TaskRepository(SnapshotRepository[Task]):
    """任务 Repository"""

    store_key = TASKS_KEY
    record_kind = "task"

    async def create(self, title: str) -> MutationResult:
        """创建任务

        前置条件：title 非空（由调用方校验）。
        """
        task = Task(
            id=str(ULID()),
            title=title,
            completed=False,
            priority=TaskPriority.MEDIUM,
        )
        log.info("task_created", task_id=task.id)
        return await self._prepend(task, task.id)

    async def toggle_completed(self, task_id: str) -> MutationResult:
        return await self._replace(
            task_id,
            lambda task: task.model_copy(update={"completed": not task.completed}),
        )

    async def set_calendar_event_id(self, task_id: str, event_id: str) -> MutationResult:
        """写入外部日历事件 ID（覆盖旧值，旧事件不做清理）"""
        result = await self._replace(
            task_id,
            lambda task: task.model_copy(update={"calendar_event_id": event_id}),
        )
        log.info(
            "task_calendar_linked",
            task_id=task_id,
            event_id=event_id,
            status=result.status.value,
        )
        return result

    def _encode(self, items: Iterable[Task]) -> str:
        return encode_tasks(items)

    def _decode(self, text: str) -> list[Task]:
        return decode_tasks(text)
