"""Task Domain Model

calendar_event_id 仅在日历关联流程成功后写入；
存储层从不校验外部事件是否仍然存在。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import TaskPriority


class Task(BaseModel):
    """Task 数据模型"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    completed: bool = Field(default=False, description="是否完成")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    due_date: datetime | None = Field(default=None, description="截止时间")
    calendar_event_id: str | None = Field(
        default=None,
        description="外部日历事件 ID",
    )
