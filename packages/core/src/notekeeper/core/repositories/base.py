"""快照式 Repository 基类

每个 Repository 独占一份内存集合，每次变更后把整个集合写回 DurableStore。
落盘失败时内存状态仍为本次会话的准绳，集合被标记为 dirty，
调用 flush() 重新写入。
加载失败后不会用内存集合覆盖磁盘快照，直到重新 load() 成功
或调用方显式 flush(force=True)。
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import ClassVar, Generic, TypeVar

import structlog

from ..exceptions import PersistenceError
from ..models.enums import MutationStatus
from ..models.results import MutationResult
from ..store.protocols import DurableStore

log = structlog.get_logger()

R = TypeVar("R")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """默认时钟"""
    return datetime.now(UTC)


class SnapshotRepository(Generic[R]):
    """整集合快照持久化的 Repository"""

    # 子类声明存储键与日志中的记录类型名
    store_key: ClassVar[str]
    record_kind: ClassVar[str]

    def __init__(self, store: DurableStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._items: list[R] = []
        self._dirty = False
        self._load_failed = False
        self._lock = asyncio.Lock()

    @property
    def is_caught_up(self) -> bool:
        """最近一次变更是否已成功落盘"""
        return not self._dirty

    @property
    def load_failed(self) -> bool:
        """最近一次 load 是否失败（此时变更只保留在内存中）"""
        return self._load_failed

    def get(self, record_id: str) -> R | None:
        index = self._index_of(record_id)
        return None if index is None else self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    async def load(self) -> MutationResult:
        """从 DurableStore 加载集合

        键不存在时集合为空；读取或解码失败时集合保持为空并返回 PERSIST_FAILED，
        之后的变更不再写回该键。
        """
        async with self._lock:
            try:
                text = await self._store.load(self.store_key)
            except PersistenceError as e:
                self._load_failed = True
                return MutationResult(status=MutationStatus.PERSIST_FAILED, error=str(e))

            if text is None:
                self._items = []
                self._dirty = False
                self._load_failed = False
                return MutationResult(status=MutationStatus.UNCHANGED)

            try:
                items = self._decode(text)
            except ValueError as e:
                log.warning(
                    "snapshot_decode_failed",
                    key=self.store_key,
                    error_type=type(e).__name__,
                )
                self._load_failed = True
                return MutationResult(
                    status=MutationStatus.PERSIST_FAILED,
                    error=f"{self.store_key} 快照无法解析",
                )

            self._items = list(items)
            self._dirty = False
            self._load_failed = False
            log.debug("snapshot_loaded", key=self.store_key, count=len(self._items))
            return MutationResult(status=MutationStatus.APPLIED)

    async def flush(self, force: bool = False) -> MutationResult:
        """把 dirty 的内存集合重新写回存储

        Args:
            force: 加载失败后仍用内存集合覆盖磁盘快照
        """
        async with self._lock:
            if force and self._load_failed:
                log.warning("snapshot_force_overwrite", key=self.store_key, count=len(self._items))
                self._load_failed = False
                self._dirty = True
            if not self._dirty:
                return MutationResult(status=MutationStatus.UNCHANGED)
            return await self._persist(None)

    async def delete(self, record_id: str) -> MutationResult:
        """按 ID 删除记录，不存在时为 NOT_FOUND"""
        async with self._lock:
            index = self._index_of(record_id)
            if index is None:
                log.info(f"{self.record_kind}_delete_not_found", record_id=record_id)
                return MutationResult(status=MutationStatus.NOT_FOUND, target_id=record_id)
            del self._items[index]
            log.info(f"{self.record_kind}_deleted", record_id=record_id)
            return await self._persist(record_id)

    async def _prepend(self, record: R, record_id: str) -> MutationResult:
        async with self._lock:
            self._items.insert(0, record)
            return await self._persist(record_id)

    async def _replace(self, record_id: str, update: Callable[[R], R]) -> MutationResult:
        """对单条记录应用 update 并落盘"""
        async with self._lock:
            index = self._index_of(record_id)
            if index is None:
                return MutationResult(status=MutationStatus.NOT_FOUND, target_id=record_id)
            self._items[index] = update(self._items[index])
            return await self._persist(record_id)

    async def _persist(self, target_id: str | None) -> MutationResult:
        """整集合写回；调用方需持有 self._lock"""
        if self._load_failed:
            self._dirty = True
            log.warning("snapshot_write_blocked", key=self.store_key, target_id=target_id)
            return MutationResult(
                status=MutationStatus.PERSIST_FAILED,
                target_id=target_id,
                error=f"{self.store_key} 快照未能加载，变更仅保留在内存中",
            )
        try:
            await self._store.save(self.store_key, self._encode(self._items))
        except PersistenceError as e:
            self._dirty = True
            log.warning(
                "snapshot_persist_failed",
                key=self.store_key,
                target_id=target_id,
            )
            return MutationResult(
                status=MutationStatus.PERSIST_FAILED,
                target_id=target_id,
                error=str(e),
            )
        self._dirty = False
        return MutationResult(status=MutationStatus.APPLIED, target_id=target_id)

    def _index_of(self, record_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == record_id:
                return index
        return None

    def _encode(self, items: Iterable[R]) -> str:
        raise NotImplementedError

    def _decode(self, text: str) -> list[R]:
        raise NotImplementedError

    def list(self) -> tuple[R, ...]:
        """返回当前集合（存储顺序，不代表显示顺序）"""
        return tuple(self._items)
