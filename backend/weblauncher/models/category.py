"""分类模型"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, event
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


def normalize_category_name(name: str) -> str:
    """分类名归一化（用于按用户唯一）"""
    return name.strip().lower()


class Category(Base):
    """分类表"""
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "normalized_name", name="uq_category_user_normalized_name"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    normalized_name = Column(String(100), nullable=False)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="categories")
    bookmark_links = relationship("BookmarkCategory", back_populates="category", passive_deletes=True)


@event.listens_for(Category.name, "set", retval=True)
def _sync_normalized_name(target, value, oldvalue, initiator):
    """name 变化时同步 normalized_name"""
    if value is not None:
        value = value.strip()
        target.normalized_name = normalize_category_name(value)
    return value
