"""外部日历相关模型"""

from datetime import datetime

from pydantic import BaseModel, Field


class CalendarInfo(BaseModel):
    """权限范围内可用的外部日历"""

    id: str = Field(description="外部日历 ID")
    name: str = Field(description="显示名称")


class CalendarEventRequest(BaseModel):
    """创建外部日历事件的请求"""

    title: str = Field(description="事件标题（任务标题）")
    start: datetime = Field(description="开始时间")
    end: datetime = Field(description="结束时间")
    reminder_offset_minutes: int = Field(
        default=30,
        ge=0,
        description="开始前多少分钟提醒",
    )
    note: str = Field(default="", description="事件备注")
