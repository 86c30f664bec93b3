"""Note Domain Model

Note 为不可变值对象：变更通过 model_copy 生成新记录替换，
id 和 created_at 在整个生命周期内保持不变。
存储格式沿用 camelCase 字段名，可选字段显式写出 null。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class NoteDraft(BaseModel):
    """创建/编辑笔记时由调用方提供的字段

    不包含 id、时间戳和收藏状态，这些由 NoteRepository 维护。
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    title: str = Field(description="标题（调用方保证非空）")
    content: str = Field(default="", description="正文，可为空")
    image: str | None = Field(default=None, description="外部图片引用")
    category: str | None = Field(default=None, description="分类名称")
    color: str | None = Field(default=None, description="显示颜色")
    is_bold: bool = Field(default=False, description="显示提示：加粗")
    is_italic: bool = Field(default=False, description="显示提示：斜体")
    is_underline: bool = Field(default=False, description="显示提示：下划线")


class Note(BaseModel):
    """Note 数据模型"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="标题")
    content: str = Field(default="", description="正文")
    image: str | None = Field(default=None, description="外部图片引用")
    category: str | None = Field(default=None, description="分类名称")
    color: str | None = Field(default=None, description="显示颜色")
    is_favorite: bool = Field(default=False, description="是否收藏")
    is_bold: bool = Field(default=False, description="显示提示：加粗")
    is_italic: bool = Field(default=False, description="显示提示：斜体")
    is_underline: bool = Field(default=False, description="显示提示：下划线")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="最近一次内容变更时间")

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")
        return self

    @classmethod
    def from_draft(cls, note_id: str, draft: NoteDraft, now: datetime) -> "Note":
        """由草稿创建新笔记，created_at = updated_at = now"""
        return cls(
            id=note_id,
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )

    def with_draft(self, draft: NoteDraft, now: datetime) -> "Note":
        """用草稿整体替换内容字段，保留 id、created_at 和收藏状态

        时钟回拨时 updated_at 不早于 created_at。
        """
        return self.model_copy(
            update={**draft.model_dump(), "updated_at": max(now, self.created_at)}
        )

    def plain_text(self) -> str:
        """单条分享使用的纯文本格式"""
        return f"{self.title}\n\n{self.content}"
