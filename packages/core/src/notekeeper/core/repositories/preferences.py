"""界面偏好 -- 当前主题名（原样文本保存在 currentTheme 键下）"""

import structlog

from ..config import DEFAULT_THEME
from ..exceptions import PersistenceError
from ..models.enums import MutationStatus
from ..models.results import MutationResult
from ..store.kv_store import THEME_KEY
from ..store.protocols import DurableStore

log = structlog.get_logger()


class Preferences:
    def __init__(self, store: DurableStore) -> None:
        self._store = store

    async def load_theme(self) -> str:
        """读取主题名，未保存或不可读时返回默认主题"""
        try:
            saved = await self._store.load(THEME_KEY)
        except PersistenceError as e:
            log.warning("theme_load_failed", key=THEME_KEY, error=str(e))
            return DEFAULT_THEME
        return saved or DEFAULT_THEME

    async def save_theme(self, name: str) -> MutationResult:
        try:
            await self._store.save(THEME_KEY, name)
        except PersistenceError as e:
            log.warning("theme_save_failed", key=THEME_KEY)
            return MutationResult(status=MutationStatus.PERSIST_FAILED, error=str(e))
        return MutationResult(status=MutationStatus.APPLIED, target_id=name)
