"""View Engine -- 笔记列表的过滤 + 排序派生

纯函数：不修改输入集合，不缓存任何结果，每次调用返回新的有序元组。
标题与分类排序依赖进程的 LC_COLLATE，由 use_collation_locale() 设置
（open_session 启动时调用一次）；未设置时为 C locale 的码位顺序。
"""

import locale
from collections.abc import Iterable

import structlog

from .models.enums import SortMode
from .models.note import Note

log = structlog.get_logger()


def use_collation_locale(name: str = "") -> bool:
    """设置进程的 LC_COLLATE

    Args:
        name: locale 名称，"" 表示使用宿主环境设置

    Returns:
        设置成功返回 True；locale 不可用时保持原设置并返回 False
    """
    try:
        applied = locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        log.warning("collation_locale_unavailable", locale=name, error=str(e))
        return False
    log.debug("collation_locale_set", locale=applied)
    return True


def collation_key(text: str) -> tuple[str, str]:
    """按当前 locale 排序的比较键

    先按大小写折叠后的文本比较，相同时再按原文比较，
    使 "apple" 与 "Banana" 的相对顺序不受大小写影响。
    """
    return (locale.strxfrm(text.casefold()), locale.strxfrm(text))


def matches_query(note: Note, query: str) -> bool:
    """标题包含 query（不区分大小写）；空 query 匹配所有笔记"""
    if not query:
        return True
    return query.casefold() in note.title.casefold()


def sort_notes(notes: Iterable[Note], sort_mode: SortMode) -> list[Note]:
    """按排序方式返回新列表；相等元素保持原有相对顺序"""
    items = list(notes)
    match sort_mode:
        case SortMode.DATE_DESC:
            return sorted(items, key=lambda n: n.updated_at, reverse=True)
        case SortMode.DATE_ASC:
            return sorted(items, key=lambda n: n.updated_at)
        case SortMode.TITLE_ASC:
            return sorted(items, key=lambda n: collation_key(n.title))
        case SortMode.TITLE_DESC:
            return sorted(items, key=lambda n: collation_key(n.title), reverse=True)
        case SortMode.CATEGORY:
            return sorted(items, key=lambda n: collation_key(n.category or ""))
        case SortMode.FAVORITE:
            # 先按 updated_at 倒序，再稳定地把收藏移到前面
            by_date = sorted(items, key=lambda n: n.updated_at, reverse=True)
            return sorted(by_date, key=lambda n: not n.is_favorite)
    raise ValueError(f"未知排序方式: {sort_mode}")


def derive_view(
    notes: Iterable[Note],
    query: str = "",
    sort_mode: SortMode = SortMode.DATE_DESC,
) -> tuple[Note, ...]:
    """派生显示用的笔记序列

    Args:
        notes: 当前笔记集合（只读）
        query: 标题搜索词
        sort_mode: 排序方式

    Returns:
        过滤并排序后的新元组
    """
    filtered = [note for note in notes if matches_query(note, query)]
    return tuple(sort_notes(filtered, SortMode(sort_mode)))
