"""NoteRepository -- 笔记集合的唯一所有者

新笔记插入到集合头部；显示顺序始终由 View Engine 决定。
收藏切换不算内容编辑，不刷新 updated_at。
"""

from collections.abc import Iterable

import structlog
from ulid import ULID

from ..models.note import Note, NoteDraft
from ..models.results import MutationResult
from ..store.codec import decode_notes, encode_notes
from ..store.kv_store import NOTES_KEY
from .base import SnapshotRepository

log = structlog.get_logger()


class NoteRepository(SnapshotRepository[Note]):
    """笔记 Repository"""

    store_key = NOTES_KEY
    record_kind = "note"

    async def create(self, draft: NoteDraft) -> MutationResult:
        """创建笔记

        前置条件：draft.title 非空（由调用方校验）。
        """
        note = Note.from_draft(str(ULID()), draft, self._clock())
        log.info("note_created", note_id=note.id, category=note.category)
        return await self._prepend(note, note.id)

    async def update(self, note_id: str, draft: NoteDraft) -> MutationResult:
        """整体替换内容字段并刷新 updated_at"""
        now = self._clock()
        result = await self._replace(note_id, lambda note: note.with_draft(draft, now))
        log.info("note_updated", note_id=note_id, status=result.status.value)
        return result

    async def toggle_favorite(self, note_id: str) -> MutationResult:
        """切换收藏状态，updated_at 保持不变"""
        return await self._replace(
            note_id,
            lambda note: note.model_copy(update={"is_favorite": not note.is_favorite}),
        )

    def _encode(self, items: Iterable[Note]) -> str:
        return encode_notes(items)

    def _decode(self, text: str) -> list[Note]:
        return decode_notes(text)
