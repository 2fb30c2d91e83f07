"""数据模型"""
from .user import User
from .category import Category, normalize_category_name
from .bookmark import Bookmark, BookmarkCategory

__all__ = [
    "User",
    "Category", "normalize_category_name",
    "Bookmark", "BookmarkCategory",
]
