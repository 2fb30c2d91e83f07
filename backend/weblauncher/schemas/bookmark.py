"""书签相关 Schema"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from .category import CategoryRef

MAX_CATEGORIES_PER_BOOKMARK = 50


def validate_absolute_url(value: str) -> str:
    """URL 必须是带协议和主机名的绝对地址"""
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc or any(c.isspace() for c in value):
        raise ValueError("A valid URL is required")
    return value


class BookmarkCreate(BaseModel):
    """创建书签"""
    description: str = Field(..., min_length=1, max_length=500)
    url: str = Field(..., min_length=1, max_length=2000)
    categories: List[str] = Field(default_factory=list, max_length=MAX_CATEGORIES_PER_BOOKMARK)

    @field_validator("description", "url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        return validate_absolute_url(v)


class BookmarkUpdate(BaseModel):
    """更新书签（未提供的字段保持不变）"""
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    url: Optional[str] = Field(None, min_length=1, max_length=2000)
    categories: Optional[List[str]] = Field(None, max_length=MAX_CATEGORIES_PER_BOOKMARK)
    pinned: Optional[bool] = None

    @field_validator("description", "url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_absolute_url(v) if v is not None else v


class BookmarkResponse(BaseModel):
    """书签响应"""
    id: str
    description: str
    url: str
    pinned: bool = False
    categories: List[CategoryRef] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DashboardViewResponse(BaseModel):
    """仪表盘筛选结果"""
    bookmarks: List[BookmarkResponse]
    total: int
    search_term: str
    selected_category_ids: List[str]
    available_category_ids: List[str]
    all_selected: bool
    empty_state: Optional[str] = None
