"""分类相关 Schema"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class CategoryCreate(BaseModel):
    """创建分类"""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CategoryUpdate(CategoryCreate):
    """重命名分类"""
    pass


class CategoryRef(BaseModel):
    """书签上引用的分类（已解析名称）"""
    id: str
    name: str

    class Config:
        from_attributes = True


class CategoryResponse(BaseModel):
    """分类响应"""
    id: str
    name: str
    is_default: bool
    created_at: datetime

    class Config:
        from_attributes = True
