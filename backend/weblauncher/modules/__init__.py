"""业务模块"""
from . import dashboard
from . import export

__all__ = [
    "dashboard",
    "export",
]
