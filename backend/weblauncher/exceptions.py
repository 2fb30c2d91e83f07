"""业务异常定义

路由与服务层抛出这些异常，由 main.py 中注册的处理器统一转换为
``{"error": ...}`` 形式的 JSON 响应。
"""
from typing import Any, Optional


class WebLauncherError(Exception):
    """业务异常基类"""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(WebLauncherError):
    """参数错误（非法导出格式、非法分类 ID 等）"""
    status_code = 400


class NotFoundError(WebLauncherError):
    """资源不存在或不属于当前用户"""
    status_code = 404


class ConflictError(WebLauncherError):
    """唯一约束冲突"""
    status_code = 409


class InternalError(WebLauncherError):
    """存储或序列化失败，只返回通用信息"""
    status_code = 500
