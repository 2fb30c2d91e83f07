"""Pydantic Schemas"""
from .user import (
    UserCreate, UserLogin, UserResponse, UserUpdate, PasswordChange,
    Token, TokenPayload, RefreshTokenRequest,
)
from .category import CategoryCreate, CategoryUpdate, CategoryRef, CategoryResponse
from .bookmark import BookmarkCreate, BookmarkUpdate, BookmarkResponse, DashboardViewResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "UserUpdate", "PasswordChange",
    "Token", "TokenPayload", "RefreshTokenRequest",
    "CategoryCreate", "CategoryUpdate", "CategoryRef", "CategoryResponse",
    "BookmarkCreate", "BookmarkUpdate", "BookmarkResponse", "DashboardViewResponse",
]
