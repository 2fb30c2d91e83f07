"""分类路由"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func
from typing import List

from ...config import settings
from ...database import get_db
from ...exceptions import ConflictError, NotFoundError
from ...models import User, Category, BookmarkCategory, normalize_category_name
from ...schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from ...utils.collation import sort_by_name
from ..deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_CATEGORY_NAMES = [
    "Productivity",
    "Media & Entertainment",
    "AI Tools",
    "Utilities",
    "Development & Code",
    "Communication & Social",
    "Design & Creativity",
    "Cloud Services",
    "System & Admin",
    "Education & Learning",
    "Finance & Shopping",
    "Health & Wellness",
    "Kids & Family",
    "Favorites/Starred",
    "Recently Used",
]

DUPLICATE_CATEGORY = "You already have a category with that name."
CATEGORY_NOT_FOUND = "Category not found or you do not have permission to access it"


async def ensure_seed_categories(db: AsyncSession, user_id: str) -> None:
    """用户还没有任何分类时写入默认分类"""
    count = await db.scalar(select(func.count()).select_from(Category).where(Category.user_id == user_id))
    if count:
        return

    db.add_all([Category(user_id=user_id, name=name, is_default=True) for name in DEFAULT_CATEGORY_NAMES])
    try:
        await db.flush()
    except IntegrityError:
        # 并发请求已经写入，放弃本次写入
        await db.rollback()
        logger.info(f"[Categories] 默认分类已存在: user={user_id}")
    else:
        logger.info(f"[Categories] 写入默认分类: user={user_id}")


async def _get_owned_category(db: AsyncSession, category_id: str, user_id: str) -> Category:
    result = await db.execute(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    )
    category = result.scalar_one_or_none()
    if not category:
        raise NotFoundError(CATEGORY_NOT_FOUND)
    return category


async def _ensure_name_available(db: AsyncSession, user_id: str, name: str, exclude_id: str = None) -> None:
    query = select(Category.id).where(
        Category.user_id == user_id,
        Category.normalized_name == normalize_category_name(name),
    )
    if exclude_id:
        query = query.where(Category.id != exclude_id)
    if (await db.execute(query)).first():
        raise ConflictError(DUPLICATE_CATEGORY)


async def _flush_or_conflict(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError(DUPLICATE_CATEGORY) from e


@router.get("", response_model=List[CategoryResponse])
async def get_categories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取分类列表（按名称排序）"""
    user_id = current_user.id
    if settings.SEED_DEFAULT_CATEGORIES:
        await ensure_seed_categories(db, user_id)

    result = await db.execute(select(Category).where(Category.user_id == user_id))
    return sort_by_name(result.scalars().all())


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """创建分类"""
    await _ensure_name_available(db, current_user.id, category_in.name)

    category = Category(user_id=current_user.id, name=category_in.name, is_default=False)
    db.add(category)
    await _flush_or_conflict(db)
    await db.refresh(category)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """重命名分类"""
    category = await _get_owned_category(db, category_id, current_user.id)
    await _ensure_name_available(db, current_user.id, category_in.name, exclude_id=category.id)

    category.name = category_in.name
    await _flush_or_conflict(db)
    await db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """删除分类：只从书签上移除引用，不删除书签"""
    category = await _get_owned_category(db, category_id, current_user.id)

    await db.execute(
        delete(BookmarkCategory).where(BookmarkCategory.category_id == category.id)
    )
    await db.delete(category)
    await db.flush()

    logger.info(f"[Categories] 删除分类: {category.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
