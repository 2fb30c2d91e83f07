"""
书签导出模块

按分类 / 搜索词筛选当前用户的书签，并导出为 pdf、markdown、csv、json
或浏览器书签 html 文件。

流程：
1. 校验导出格式和分类参数（在访问数据库之前）
2. 一次查询取出匹配的书签（置顶优先，再按创建时间倒序）
3. 内存中按搜索词二次过滤
4. 完整渲染文档后再返回，失败时不会产生半截输出

使用示例:
    from weblauncher.modules.export import generate_export

    document = await generate_export(db, user.id, "csv", category_ids="all")
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from ...config import settings
from ...exceptions import InternalError, ValidationError, WebLauncherError
from ...models import Bookmark, BookmarkCategory
from ..dashboard import UNCATEGORIZED_ID, matches_search_term
from .formats import (
    ExportRecord,
    render_csv,
    render_html,
    render_json,
    render_markdown,
    render_pdf,
)

logger = logging.getLogger(__name__)

Renderer = Callable[[List[ExportRecord], datetime], bytes]


@dataclass(frozen=True)
class ExportFormat:
    """导出格式定义"""
    name: str
    extension: str
    media_type: str
    renderer: Renderer


EXPORT_FORMATS: Dict[str, ExportFormat] = {
    fmt.name: fmt
    for fmt in (
        ExportFormat("pdf", ".pdf", "application/pdf", render_pdf),
        ExportFormat("markdown", ".md", "text/markdown; charset=utf-8", render_markdown),
        ExportFormat("csv", ".csv", "text/csv; charset=utf-8", render_csv),
        ExportFormat("json", ".json", "application/json", render_json),
        ExportFormat("html", ".html", "text/html; charset=utf-8", render_html),
    )
}


@dataclass(frozen=True)
class CategorySelection:
    """解析后的分类筛选条件"""
    category_ids: Tuple[str, ...] = ()
    include_uncategorized: bool = False


@dataclass
class ExportDocument:
    """导出结果"""
    content: bytes
    media_type: str
    filename: str
    count: int

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


# ==================== 参数校验 ====================

def get_export_format(name: str) -> ExportFormat:
    """查找导出格式，不支持时抛出 ValidationError"""
    fmt = EXPORT_FORMATS.get((name or "").lower())
    if fmt is None:
        supported = ", ".join(EXPORT_FORMATS)
        raise ValidationError(f"Invalid export format. Supported formats: {supported}")
    return fmt


def parse_category_filter(
    raw: Union[None, str, Sequence[str]],
) -> Optional[CategorySelection]:
    """解析 categoryIds 参数

    None / 空 / "all" 表示不筛选；否则为逗号分隔的分类 ID，
    可以包含 UNCATEGORIZED_ID。
    """
    if raw is None:
        return None
    values: Iterable[str] = raw.split(",") if isinstance(raw, str) else raw
    ids = [value.strip() for value in values if value and value.strip()]
    if not ids or "all" in ids:
        return None

    include_uncategorized = UNCATEGORIZED_ID in ids
    category_ids: List[str] = []
    invalid: List[str] = []
    for value in ids:
        if value == UNCATEGORIZED_ID or value in category_ids:
            continue
        try:
            category_ids.append(str(uuid.UUID(value)))
        except ValueError:
            invalid.append(value)

    if invalid:
        raise ValidationError(
            "One or more category ids are malformed.",
            details={"invalid_category_ids": invalid},
        )

    return CategorySelection(tuple(category_ids), include_uncategorized)


# ==================== 查询 ====================

def build_bookmark_query(user_id: str, selection: Optional[CategorySelection] = None) -> Select:
    """当前用户的书签查询：置顶优先，再按创建时间倒序，预加载分类"""
    query = select(Bookmark).where(Bookmark.user_id == user_id)

    if selection is not None:
        conditions = []
        if selection.category_ids:
            conditions.append(
                Bookmark.category_links.any(BookmarkCategory.category_id.in_(selection.category_ids))
            )
        if selection.include_uncategorized:
            conditions.append(~Bookmark.category_links.any())
        query = query.where(or_(*conditions))

    return (
        query
        .options(selectinload(Bookmark.category_links).selectinload(BookmarkCategory.category))
        .order_by(Bookmark.pinned.desc(), Bookmark.created_at.desc())
    )


def filter_by_search_term(records: List[ExportRecord], search_term: Optional[str]) -> List[ExportRecord]:
    term = (search_term or "").strip().lower()
    if not term:
        return records
    return [record for record in records if matches_search_term(record, term)]


def build_filename(fmt: ExportFormat, exported_at: datetime) -> str:
    """weblauncher-export-2024-01-02T03-04-05.csv"""
    return f"{settings.EXPORT_FILENAME_PREFIX}-{exported_at.strftime('%Y-%m-%dT%H-%M-%S')}{fmt.extension}"


# ==================== 导出 ====================

async def generate_export(
    db: AsyncSession,
    user_id: str,
    export_format: str,
    category_ids: Union[None, str, Sequence[str]] = None,
    search_term: Optional[str] = None,
    exported_at: Optional[datetime] = None,
) -> ExportDocument:
    """生成导出文档

    Raises:
        ValidationError: 格式或分类参数非法（此时不会访问数据库）
        InternalError: 查询或渲染失败
    """
    fmt = get_export_format(export_format)
    selection = parse_category_filter(category_ids)
    exported_at = exported_at or datetime.utcnow()

    try:
        result = await db.execute(build_bookmark_query(user_id, selection))
        records = [ExportRecord.from_bookmark(bookmark) for bookmark in result.scalars().all()]
        records = filter_by_search_term(records, search_term)
        content = fmt.renderer(records, exported_at)
    except WebLauncherError:
        raise
    except Exception as e:
        logger.exception(f"[Export] 导出失败: user={user_id}, format={fmt.name}")
        raise InternalError("Failed to export URLs") from e

    logger.info(f"[Export] user={user_id}, format={fmt.name}, count={len(records)}, bytes={len(content)}")
    return ExportDocument(
        content=content,
        media_type=fmt.media_type,
        filename=build_filename(fmt, exported_at),
        count=len(records),
    )


__all__ = [
    "EXPORT_FORMATS",
    "ExportFormat",
    "ExportDocument",
    "ExportRecord",
    "CategorySelection",
    "get_export_format",
    "parse_category_filter",
    "build_bookmark_query",
    "filter_by_search_term",
    "build_filename",
    "generate_export",
]
