"""操作结果模型

每个变更操作都返回可区分的成功 / 失败 / 未找到结果，
由展示层决定如何提示用户。
"""

from pydantic import BaseModel, Field

from .enums import LinkState, LinkStatus, MutationStatus, ShareStatus


class MutationResult(BaseModel):
    """Repository 变更结果"""

    status: MutationStatus
    target_id: str | None = Field(default=None, description="受影响的记录 ID")
    error: str = Field(default="", description="失败描述")

    @property
    def ok(self) -> bool:
        """内存状态与磁盘均已更新（或无需更新）"""
        return self.status in (MutationStatus.APPLIED, MutationStatus.UNCHANGED)

    @property
    def changed(self) -> bool:
        """内存状态是否发生变化（落盘失败时内存依然已变更）"""
        return self.status in (MutationStatus.APPLIED, MutationStatus.PERSIST_FAILED)


class LinkResult(BaseModel):
    """日历关联流程单步结果"""

    status: LinkStatus
    state: LinkState = Field(description="此步完成后的流程状态")
    event_id: str | None = Field(default=None, description="新建的外部事件 ID")
    error: str = Field(default="", description="失败描述")


class ShareResult(BaseModel):
    """导出/分享结果"""

    status: ShareStatus
    path: str | None = Field(default=None, description="写出的文件路径")
    error: str = Field(default="", description="失败描述")

    @property
    def ok(self) -> bool:
        return self.status == ShareStatus.SHARED
