"""CategorySet -- 显式持有的有序分类集合

以默认分类为种子，只能通过 add() 增长，从不收缩；
名称比较区分大小写，不做大小写去重。
落盘失败与加载失败的处理与 SnapshotRepository 相同：
内存集合标记为 dirty，由 flush() 重试；加载失败后不覆盖磁盘快照。
"""

import structlog

from ..config import DEFAULT_CATEGORIES
from ..exceptions import PersistenceError
from ..models.enums import MutationStatus
from ..models.results import MutationResult
from ..store.codec import decode_names, encode_names
from ..store.kv_store import CATEGORIES_KEY
from ..store.protocols import DurableStore

log = structlog.get_logger()


class CategorySet:
    """分类集合"""

    store_key = CATEGORIES_KEY

    def __init__(
        self,
        store: DurableStore,
        seed: tuple[str, ...] = DEFAULT_CATEGORIES,
    ) -> None:
        self._store = store
        self._names: list[str] = list(dict.fromkeys(seed))
        self._dirty = False
        self._load_failed = False

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def is_caught_up(self) -> bool:
        return not self._dirty

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    async def load(self) -> MutationResult:
        """加载已保存的分类；种子分类始终保留在最前"""
        try:
            text = await self._store.load(CATEGORIES_KEY)
        except PersistenceError as e:
            self._load_failed = True
            return MutationResult(status=MutationStatus.PERSIST_FAILED, error=str(e))
        if text is None:
            self._load_failed = False
            return MutationResult(status=MutationStatus.UNCHANGED)

        try:
            stored = decode_names(text)
        except ValueError:
            log.warning("categories_decode_failed")
            self._load_failed = True
            return MutationResult(
                status=MutationStatus.PERSIST_FAILED,
                error=f"{CATEGORIES_KEY} 快照无法解析",
            )

        for name in stored:
            if name not in self._names:
                self._names.append(name)
        self._load_failed = False
        return MutationResult(status=MutationStatus.APPLIED)

    async def add(self, name: str) -> MutationResult:
        """追加分类

        名称去除首尾空白；空名称或已存在的名称不做变更，返回 UNCHANGED。
        """
        cleaned = name.strip()
        if not cleaned or cleaned in self._names:
            return MutationResult(status=MutationStatus.UNCHANGED, target_id=cleaned or None)

        self._names.append(cleaned)
        log.info("category_added", category=cleaned)
        return await self._persist(cleaned)

    async def flush(self, force: bool = False) -> MutationResult:
        """重新写入未落盘的分类；force 时加载失败也覆盖磁盘快照"""
        if force and self._load_failed:
            log.warning("categories_force_overwrite", count=len(self._names))
            self._load_failed = False
            self._dirty = True
        if not self._dirty:
            return MutationResult(status=MutationStatus.UNCHANGED)
        return await self._persist(None)

    async def _persist(self, target_id: str | None) -> MutationResult:
        if self._load_failed:
            self._dirty = True
            log.warning("categories_write_blocked", category=target_id)
            return MutationResult(
                status=MutationStatus.PERSIST_FAILED,
                target_id=target_id,
                error=f"{CATEGORIES_KEY} 快照未能加载，变更仅保留在内存中",
            )
        try:
            await self._store.save(CATEGORIES_KEY, encode_names(self._names))
        except PersistenceError as e:
            self._dirty = True
            log.warning("categories_persist_failed", category=target_id)
            return MutationResult(
                status=MutationStatus.PERSIST_FAILED,
                target_id=target_id,
                error=str(e),
            )
        self._dirty = False
        return MutationResult(status=MutationStatus.APPLIED, target_id=target_id)
