"""书签路由"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import List, Optional

from ...database import get_db
from ...exceptions import NotFoundError, ValidationError
from ...models import User, Bookmark, BookmarkCategory, Category
from ...modules.dashboard import DashboardFilter
from ...modules.export import build_bookmark_query
from ...schemas import BookmarkCreate, BookmarkUpdate, BookmarkResponse, DashboardViewResponse
from ..deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

BOOKMARK_NOT_FOUND = "URL not found or you do not have permission to access it"


def bookmark_to_response(bookmark: Bookmark) -> BookmarkResponse:
    """转换为响应格式（需预先加载分类）"""
    return BookmarkResponse(
        id=bookmark.id,
        description=bookmark.description,
        url=bookmark.url,
        pinned=bookmark.pinned,
        categories=[{"id": c.id, "name": c.name} for c in bookmark.categories],
        created_at=bookmark.created_at,
        updated_at=bookmark.updated_at,
    )


async def validate_category_ids(db: AsyncSession, category_ids: List[str], user_id: str) -> List[str]:
    """去重并确认所有分类都属于当前用户，保持传入顺序"""
    unique_ids = list(dict.fromkeys(str(cid) for cid in category_ids))
    if not unique_ids:
        return []

    result = await db.execute(
        select(Category.id).where(Category.id.in_(unique_ids), Category.user_id == user_id)
    )
    valid_ids = set(result.scalars().all())
    invalid_ids = [cid for cid in unique_ids if cid not in valid_ids]
    if invalid_ids:
        raise ValidationError(
            "One or more categories are invalid or unavailable.",
            details={"invalid_category_ids": invalid_ids},
        )
    return unique_ids


async def _load_bookmark(db: AsyncSession, bookmark_id: str, user_id: str) -> Bookmark:
    """带分类加载单个书签"""
    result = await db.execute(
        build_bookmark_query(user_id)
        .where(Bookmark.id == bookmark_id)
        .execution_options(populate_existing=True)
    )
    bookmark = result.scalar_one_or_none()
    if not bookmark:
        raise NotFoundError(BOOKMARK_NOT_FOUND)
    return bookmark


async def _get_owned_bookmark(db: AsyncSession, bookmark_id: str, user_id: str) -> Bookmark:
    """不加载分类，只确认归属"""
    result = await db.execute(
        select(Bookmark).where(Bookmark.id == bookmark_id, Bookmark.user_id == user_id)
    )
    bookmark = result.scalar_one_or_none()
    if not bookmark:
        raise NotFoundError(BOOKMARK_NOT_FOUND)
    return bookmark


def _add_category_links(db: AsyncSession, bookmark_id: str, category_ids: List[str]) -> None:
    for position, category_id in enumerate(category_ids):
        db.add(BookmarkCategory(bookmark_id=bookmark_id, category_id=category_id, position=position))


@router.get("", response_model=List[BookmarkResponse])
async def get_bookmarks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取书签列表（置顶优先，再按创建时间倒序）"""
    result = await db.execute(build_bookmark_query(current_user.id))
    return [bookmark_to_response(b) for b in result.scalars().all()]


@router.get("/view", response_model=DashboardViewResponse)
async def get_dashboard_view(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    category_ids: Optional[str] = Query(None, alias="categoryIds"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """仪表盘视图：按搜索词和分类筛选书签

    categoryIds 为逗号分隔的分类 ID（可包含 __UNCATEGORIZED__），为空或 all 表示全部。
    """
    result = await db.execute(build_bookmark_query(current_user.id))
    bookmarks = [bookmark_to_response(b) for b in result.scalars().all()]

    dashboard = DashboardFilter(bookmarks)
    if category_ids:
        dashboard.select_categories(cid.strip() for cid in category_ids.split(",") if cid.strip())
    view = dashboard.set_search_term(search_term)

    return DashboardViewResponse(
        bookmarks=list(view.bookmarks),
        total=len(view.bookmarks),
        search_term=view.search_term,
        selected_category_ids=[cid for cid in view.available_category_ids if cid in view.selected_category_ids],
        available_category_ids=list(view.available_category_ids),
        all_selected=view.all_selected,
        empty_state=view.empty_state.value if view.empty_state else None,
    )


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    bookmark_in: BookmarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建书签"""
    category_ids = await validate_category_ids(db, bookmark_in.categories, current_user.id)

    bookmark = Bookmark(
        user_id=current_user.id,
        description=bookmark_in.description,
        url=bookmark_in.url,
        pinned=False,
    )
    db.add(bookmark)
    await db.flush()

    _add_category_links(db, bookmark.id, category_ids)
    await db.flush()
    logger.info(f"[Bookmarks] 创建书签: {bookmark.id}, 分类 {len(category_ids)} 个")

    return bookmark_to_response(await _load_bookmark(db, bookmark.id, current_user.id))


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: str,
    bookmark_in: BookmarkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """更新书签"""
    bookmark = await _get_owned_bookmark(db, bookmark_id, current_user.id)

    if bookmark_in.description is not None:
        bookmark.description = bookmark_in.description
    if bookmark_in.url is not None:
        bookmark.url = bookmark_in.url
    if bookmark_in.pinned is not None:
        bookmark.pinned = bookmark_in.pinned

    # 更新分类
    if bookmark_in.categories is not None:
        category_ids = await validate_category_ids(db, bookmark_in.categories, current_user.id)
        await db.execute(
            delete(BookmarkCategory).where(BookmarkCategory.bookmark_id == bookmark.id)
        )
        _add_category_links(db, bookmark.id, category_ids)
        # 仅修改分类时也刷新更新时间
        bookmark.updated_at = datetime.utcnow()

    await db.flush()
    return bookmark_to_response(await _load_bookmark(db, bookmark.id, current_user.id))


@router.put("/{bookmark_id}/pin", response_model=BookmarkResponse)
async def toggle_pin(
    bookmark_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """切换置顶状态"""
    bookmark = await _get_owned_bookmark(db, bookmark_id, current_user.id)
    bookmark.pinned = not bookmark.pinned
    await db.flush()
    return bookmark_to_response(await _load_bookmark(db, bookmark.id, current_user.id))


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(
    bookmark_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除书签"""
    bookmark = await _get_owned_bookmark(db, bookmark_id, current_user.id)

    await db.execute(
        delete(BookmarkCategory).where(BookmarkCategory.bookmark_id == bookmark.id)
    )
    await db.delete(bookmark)
    await db.flush()
    logger.info(f"[Bookmarks] 删除书签: {bookmark.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
