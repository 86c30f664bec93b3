"""ExportShareService -- 笔记导出与分享

export_all: 整个笔记集合写成 JSON 快照交给平台分享，文件保留给用户。
share_one: 单条笔记写成 "标题\\n\\n正文" 临时文件分享，分享返回后总是删除。
两者对预期内的失败只返回结果，不抛出异常。
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from . import config
from .exceptions import SharingUnavailableError, TransientFileError
from .models.enums import ShareStatus
from .models.note import Note
from .models.results import ShareResult
from .store.codec import encode_notes
from .store.protocols import SharingProvider, TransientFileSystem

log = structlog.get_logger()

JSON_MIME = "application/json"
TEXT_MIME = "text/plain"


class ExportShareService:
    """导出/分享服务"""

    def __init__(
        self,
        files: TransientFileSystem,
        sharing: SharingProvider,
        export_dir: Path | None = None,
        cache_dir: Path | None = None,
    ) -> None:
        self._files = files
        self._sharing = sharing
        self._export_dir = export_dir or config.get_export_dir()
        self._cache_dir = cache_dir or config.get_cache_dir()

    async def export_all(self, notes: Iterable[Note]) -> ShareResult:
        """导出全部笔记并交给平台分享"""
        path = self._export_dir / config.EXPORT_FILE_NAME
        try:
            await self._files.write_text(path, encode_notes(notes))
            await self._hand_off(path, JSON_MIME, "Notes backup")
        except SharingUnavailableError as e:
            return ShareResult(status=ShareStatus.SHARING_UNAVAILABLE, path=str(path), error=str(e))
        except TransientFileError as e:
            log.error("notes_export_failed", path=str(path), error_type=type(e).__name__)
            return ShareResult(status=ShareStatus.FAILED, error=str(e))
        except Exception as e:
            log.error("notes_export_failed", path=str(path), error_type=type(e).__name__)
            return ShareResult(status=ShareStatus.FAILED, path=str(path), error=f"导出失败: {e}")

        log.info("notes_exported", path=str(path))
        return ShareResult(status=ShareStatus.SHARED, path=str(path))

    async def share_one(self, note: Note) -> ShareResult:
        """分享单条笔记；临时文件在分享返回后删除"""
        path = self._cache_dir / config.SHARE_FILE_NAME
        try:
            await self._files.write_text(path, note.plain_text())
        except TransientFileError as e:
            log.error("note_share_failed", note_id=note.id, error_type=type(e).__name__)
            return ShareResult(status=ShareStatus.FAILED, error=str(e))

        try:
            await self._hand_off(path, TEXT_MIME, note.title)
        except SharingUnavailableError as e:
            return ShareResult(status=ShareStatus.SHARING_UNAVAILABLE, error=str(e))
        except Exception as e:
            log.error("note_share_failed", note_id=note.id, error_type=type(e).__name__)
            return ShareResult(status=ShareStatus.FAILED, error=f"分享失败: {e}")
        finally:
            await self._discard(path)

        log.info("note_shared", note_id=note.id)
        return ShareResult(status=ShareStatus.SHARED)

    async def _hand_off(self, path: Path, mime_type: str, title: str) -> None:
        """交给平台分享

        Raises:
            SharingUnavailableError: 平台不支持分享
        """
        if not await self._sharing.is_available():
            log.info("sharing_unavailable", path=str(path))
            raise SharingUnavailableError()
        await self._sharing.share(path, mime_type, title)

    async def _discard(self, path: Path) -> None:
        try:
            await self._files.delete_file(path)
        except TransientFileError as e:
            log.warning("transient_file_delete_failed", path=str(path), error_type=type(e).__name__)
