"""调用方输入校验

在调用 repository 之前执行；repository 本身假定输入已校验。
"""

from collections.abc import Container

from .exceptions import InvalidInputError
from .models.note import NoteDraft


def check_note_draft(draft: NoteDraft, categories: Container[str]) -> NoteDraft:
    """校验笔记草稿

    Args:
        draft: 待保存的草稿
        categories: 当前已知分类

    Returns:
        标题去除首尾空白后的草稿

    Raises:
        InvalidInputError: 标题为空，或分类不在已知分类中
    """
    title = draft.title.strip()
    if not title:
        raise InvalidInputError("title", "标题不能为空")
    if draft.category is not None and draft.category not in categories:
        raise InvalidInputError("category", f"未知分类: {draft.category}")
    return draft.model_copy(update={"title": title})


def check_task_title(title: str) -> str:
    """校验任务标题，返回去除首尾空白后的标题

    Raises:
        InvalidInputError: 标题为空
    """
    cleaned = title.strip()
    if not cleaned:
        raise InvalidInputError("title", "标题不能为空")
    return cleaned
