"""工具函数"""
from .security import hash_password, verify_password, create_access_token, create_refresh_token, decode_token
from .collation import category_sort_key, sort_by_name

__all__ = [
    "hash_password", "verify_password", "create_access_token", "create_refresh_token", "decode_token",
    "category_sort_key", "sort_by_name",
]
