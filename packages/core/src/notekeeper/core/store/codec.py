"""集合快照编解码

逐字段 JSON 编码：camelCase 字段名，可选字段显式写出 null，
时间戳为 ISO-8601。save→load 往返后所有字段保持一致。
"""

from collections.abc import Iterable

from pydantic import TypeAdapter

from ..models.note import Note
from ..models.task import Task

_NOTES_ADAPTER = TypeAdapter(list[Note])
_TASKS_ADAPTER = TypeAdapter(list[Task])
_NAMES_ADAPTER = TypeAdapter(list[str])


def encode_notes(notes: Iterable[Note]) -> str:
    """编码笔记集合"""
    return _NOTES_ADAPTER.dump_json(list(notes), by_alias=True).decode("utf-8")


def decode_notes(text: str) -> list[Note]:
    """解码笔记集合

    Raises:
        pydantic.ValidationError: 快照格式损坏
    """
    return _NOTES_ADAPTER.validate_json(text)


def encode_tasks(tasks: Iterable[Task]) -> str:
    """编码任务集合"""
    return _TASKS_ADAPTER.dump_json(list(tasks), by_alias=True).decode("utf-8")


def decode_tasks(text: str) -> list[Task]:
    """解码任务集合

    Raises:
        pydantic.ValidationError: 快照格式损坏
    """
    return _TASKS_ADAPTER.validate_json(text)


def encode_names(names: Iterable[str]) -> str:
    return _NAMES_ADAPTER.dump_json(list(names)).decode("utf-8")


def decode_names(text: str) -> list[str]:
    return _NAMES_ADAPTER.validate_json(text)
