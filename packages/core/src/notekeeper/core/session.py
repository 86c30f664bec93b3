"""Session -- 组合根

会话启动时构造每个组件的唯一实例并按引用交给使用方，不存在全局单例。
启动顺序：
1. 生成 session_id 并绑定到日志上下文
2. 设置排序使用的 LC_COLLATE
3. 打开键值存储
4. 加载笔记 / 任务 / 分类
5. 请求一次日历权限
6. 构造日历关联流程与导出/分享服务
"""

from pathlib import Path

import structlog
from ulid import ULID

from . import config
from .adapters import LocalFileSystem, MemoryCalendar, OutboxSharing
from .calendar import CalendarAccess, CalendarLinkWorkflow
from .logging_config import bind_session, unbind_session
from .models.enums import MutationStatus
from .models.results import MutationResult
from .repositories import CategorySet, NoteRepository, Preferences, TaskRepository
from .repositories.base import Clock, utc_now
from .share import ExportShareService
from .store import SqliteKeyValueStore, open_store
from .store.protocols import CalendarProvider, SharingProvider, TransientFileSystem
from .view import use_collation_locale

log = structlog.get_logger()


class Session:
    """一次用户会话持有的组件实例"""

    def __init__(
        self,
        store: SqliteKeyValueStore,
        notes: NoteRepository,
        tasks: TaskRepository,
        categories: CategorySet,
        preferences: Preferences,
        calendar: CalendarAccess,
        calendar_link: CalendarLinkWorkflow,
        sharing: ExportShareService,
        session_id: str,
    ) -> None:
        self.session_id = session_id
        self.store = store
        self.notes = notes
        self.tasks = tasks
        self.categories = categories
        self.preferences = preferences
        self.calendar = calendar
        self.calendar_link = calendar_link
        self.sharing = sharing
        # 启动时加载失败的结果，供展示层提示用户
        self.load_warnings: list[MutationResult] = []

    @property
    def is_caught_up(self) -> bool:
        return (
            self.notes.is_caught_up
            and self.tasks.is_caught_up
            and self.categories.is_caught_up
        )

    async def close(self) -> None:
        """刷新未落盘的集合并关闭数据库连接"""
        try:
            for repo in (self.notes, self.tasks, self.categories):
                result = await repo.flush()
                if not result.ok:
                    log.warning(
                        "session_flush_failed",
                        key=repo.store_key,
                        error=result.error,
                    )
        finally:
            await self.store.conn.close()
        log.info("session_closed")
        unbind_session()


async def open_session(
    db_path: str | None = None,
    calendar_provider: CalendarProvider | None = None,
    sharing_provider: SharingProvider | None = None,
    files: TransientFileSystem | None = None,
    clock: Clock = utc_now,
    export_dir: Path | None = None,
    cache_dir: Path | None = None,
    collation_locale: str | None = None,
) -> Session:
    """打开会话

    Args:
        db_path: SQLite 数据库路径（默认取 NOTEKEEPER_DB_PATH）
        calendar_provider: 外部日历（默认 MemoryCalendar）
        sharing_provider: 平台分享（默认 OutboxSharing）
        files: 临时文件系统（默认 LocalFileSystem）
        clock: 时间来源
        export_dir: 导出目录
        cache_dir: 临时文件目录
        collation_locale: 排序 locale（默认取 NOTEKEEPER_LOCALE，"" 为宿主环境设置）

    Returns:
        已加载完成的 Session
    """
    session_id = str(ULID())
    bind_session(session_id)
    use_collation_locale(
        config.get_collation_locale() if collation_locale is None else collation_locale
    )
    store = await open_store(db_path or config.get_db_path())

    notes = NoteRepository(store, clock=clock)
    tasks = TaskRepository(store, clock=clock)
    categories = CategorySet(store)
    preferences = Preferences(store)

    warnings: list[MutationResult] = []
    for loader in (notes.load, tasks.load, categories.load):
        result = await loader()
        if result.status == MutationStatus.PERSIST_FAILED:
            warnings.append(result)

    calendar = CalendarAccess(calendar_provider or MemoryCalendar())
    await calendar.request_permission()

    sharing = ExportShareService(
        files or LocalFileSystem(),
        sharing_provider or OutboxSharing(config.get_outbox_dir()),
        export_dir=export_dir,
        cache_dir=cache_dir,
    )

    session = Session(
        store=store,
        notes=notes,
        tasks=tasks,
        categories=categories,
        preferences=preferences,
        calendar=calendar,
        calendar_link=CalendarLinkWorkflow(calendar, tasks),
        sharing=sharing,
        session_id=session_id,
    )
    session.load_warnings = warnings
    log.info(
        "session_opened",
        note_count=len(notes),
        task_count=len(tasks),
        calendar_granted=calendar.granted,
        warnings=len(warnings),
    )
    return session
