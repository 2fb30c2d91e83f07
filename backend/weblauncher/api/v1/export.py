"""导出路由"""
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from ...database import get_db
from ...models import User
from ...modules.export import generate_export
from ..deps import get_current_user

router = APIRouter()


@router.get("/{export_format}")
async def export_bookmarks(
    export_format: str,
    category_ids: Optional[str] = Query(None, alias="categoryIds"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """导出书签

    - export_format: pdf / markdown / csv / json / html
    - categoryIds: 逗号分隔的分类 ID，可包含 __UNCATEGORIZED__；all 或不传表示全部
    - searchTerm: 按描述和 URL 过滤（不区分大小写）
    """
    document = await generate_export(
        db,
        current_user.id,
        export_format,
        category_ids=category_ids,
        search_term=search_term,
    )
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": document.content_disposition},
    )
