"""
仪表盘筛选模块

维护一次仪表盘会话内的书签列表、搜索词和分类选择，每次状态变化后
重新计算可见书签并交给渲染回调。

选择规则：
- "未选中任何分类" 等价于 "选中全部分类"，选择集合永远不会变为空
- UNCATEGORIZED_ID 代表没有任何分类的书签，不是真实存储的分类
- ALL_CATEGORIES_ID 代表 "全部"，只能选中，不能直接取消

使用示例:
    from weblauncher.modules.dashboard import DashboardFilter

    dashboard = DashboardFilter(bookmarks, on_render=render)
    dashboard.set_search_term("git")
    dashboard.toggle_category(UNCATEGORIZED_ID)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ...utils.collation import category_sort_key

logger = logging.getLogger(__name__)

UNCATEGORIZED_ID = "__UNCATEGORIZED__"
ALL_CATEGORIES_ID = "__ALL__"


class EmptyState(str, Enum):
    """空列表提示类型"""
    NO_BOOKMARKS = "no_bookmarks"  # 还没有任何书签
    NO_MATCHES = "no_matches"      # 有书签，但被筛选条件全部过滤


@dataclass(frozen=True)
class DashboardView:
    """一次重新计算的结果"""
    bookmarks: Tuple[Any, ...]
    search_term: str
    selected_category_ids: FrozenSet[str]
    available_category_ids: Tuple[str, ...]
    empty_state: Optional[EmptyState] = None

    @property
    def all_selected(self) -> bool:
        """全选复选框是否处于选中状态"""
        return self.selected_category_ids == frozenset(self.available_category_ids)


def _field(record: Any, name: str, default: Any = None) -> Any:
    """同时支持 dict 与对象（ORM / Pydantic）"""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def bookmark_categories(bookmark: Any) -> List[Any]:
    return list(_field(bookmark, "categories") or [])


def category_ids(bookmark: Any) -> List[str]:
    """书签上所有分类 ID"""
    return [str(_field(category, "id")) for category in bookmark_categories(bookmark)]


def matches_search_term(bookmark: Any, search_term: str) -> bool:
    """描述或 URL 包含搜索词（不区分大小写），空搜索词匹配所有书签"""
    if not search_term:
        return True
    description = (_field(bookmark, "description") or "").lower()
    url = (_field(bookmark, "url") or "").lower()
    return search_term in description or search_term in url


class DashboardFilter:
    """仪表盘筛选状态

    每个仪表盘会话创建一个实例，由界面事件回调持有并调用。
    所有操作都是同步的，选择集合总是整体替换，回调看到的永远是完整状态。
    """

    def __init__(
        self,
        bookmarks: Iterable[Any] = (),
        on_render: Optional[Callable[[DashboardView], None]] = None,
    ):
        self._bookmarks: List[Any] = []
        self._search_term = ""
        self._selected: FrozenSet[str] = frozenset()
        self._available: Tuple[str, ...] = ()
        self._on_render = on_render
        self._view: Optional[DashboardView] = None
        self.set_bookmarks(bookmarks)

    # ==================== 状态 ====================

    @property
    def bookmarks(self) -> Tuple[Any, ...]:
        return tuple(self._bookmarks)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def selected_category_ids(self) -> FrozenSet[str]:
        return self._selected

    @property
    def available_category_ids(self) -> Tuple[str, ...]:
        return self._available

    @property
    def view(self) -> Optional[DashboardView]:
        """最近一次计算结果"""
        return self._view

    def _full_selection(self) -> FrozenSet[str]:
        return frozenset(self._available)

    def _collect_available(self) -> Tuple[str, ...]:
        """所有书签上出现过的分类 ID（按分类名排序），有未分类书签时追加哨兵"""
        names = {}
        has_uncategorized = False
        for bookmark in self._bookmarks:
            categories = bookmark_categories(bookmark)
            if not categories:
                has_uncategorized = True
            for category in categories:
                names.setdefault(str(_field(category, "id")), _field(category, "name") or "")

        available = sorted(names, key=lambda cid: (category_sort_key(names[cid]), cid))
        if has_uncategorized:
            available.append(UNCATEGORIZED_ID)
        return tuple(available)

    # ==================== 操作 ====================

    def set_bookmarks(self, bookmarks: Iterable[Any]) -> DashboardView:
        """替换书签列表（从存储刷新后调用）

        之前是全选则保持全选；否则保留仍然存在的分类，全部失效时回到全选。
        """
        was_full = not self._available or self._selected == self._full_selection()
        self._bookmarks = list(bookmarks)
        self._available = self._collect_available()

        if was_full:
            self._selected = self._full_selection()
        else:
            self._selected = (self._selected & self._full_selection()) or self._full_selection()

        logger.debug(
            f"[Dashboard] 加载书签: {len(self._bookmarks)} 条, 分类 {len(self._available)} 个"
        )
        return self.recompute()

    def set_search_term(self, term: Optional[str]) -> DashboardView:
        """更新搜索词"""
        self._search_term = (term or "").strip().lower()
        return self.recompute()

    def toggle_category(self, category_id: str) -> DashboardView:
        """切换单个分类的选中状态"""
        if category_id == ALL_CATEGORIES_ID:
            # "全部" 不能被取消，总是回到全选
            self._selected = self._full_selection()
            return self.recompute()

        if category_id not in self._available:
            logger.debug(f"[Dashboard] 忽略未知分类: {category_id}")
            return self.recompute()

        selected = set(self._selected)
        if category_id in selected:
            selected.remove(category_id)
        else:
            selected.add(category_id)

        self._selected = frozenset(selected) or self._full_selection()
        return self.recompute()

    def select_categories(self, selected_ids: Optional[Iterable[str]]) -> DashboardView:
        """整体替换选择集合；None、"all" 或没有可用分类时为全选"""
        if selected_ids is None:
            self._selected = self._full_selection()
            return self.recompute()

        ids = {str(cid) for cid in selected_ids}
        if "all" in ids or ALL_CATEGORIES_ID in ids:
            self._selected = self._full_selection()
        else:
            self._selected = frozenset(ids & set(self._available)) or self._full_selection()
        return self.recompute()

    # ==================== 计算 ====================

    def matches_search(self, bookmark: Any) -> bool:
        return matches_search_term(bookmark, self._search_term)

    def matches_category(self, bookmark: Any) -> bool:
        if not self._available or not self._selected:
            return True
        ids = category_ids(bookmark)
        if not ids:
            return UNCATEGORIZED_ID in self._selected
        return any(cid in self._selected for cid in ids)

    def recompute(self) -> DashboardView:
        """重新计算可见书签（保持存储返回的顺序）并触发渲染"""
        visible = tuple(
            bookmark for bookmark in self._bookmarks
            if self.matches_search(bookmark) and self.matches_category(bookmark)
        )

        if not self._bookmarks:
            empty_state = EmptyState.NO_BOOKMARKS
        elif not visible:
            empty_state = EmptyState.NO_MATCHES
        else:
            empty_state = None

        view = DashboardView(
            bookmarks=visible,
            search_term=self._search_term,
            selected_category_ids=self._selected,
            available_category_ids=self._available,
            empty_state=empty_state,
        )
        self._view = view

        if self._on_render is not None:
            self._on_render(view)
        return view


__all__ = [
    "UNCATEGORIZED_ID",
    "ALL_CATEGORIES_ID",
    "EmptyState",
    "DashboardView",
    "DashboardFilter",
    "category_ids",
    "matches_search_term",
]
