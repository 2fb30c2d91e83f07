"""书签模型"""
from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class BookmarkCategory(Base):
    """书签-分类关联表

    position 记录分类被指定的顺序，第一个分类即书签的"主分类"。
    """
    __tablename__ = "bookmark_categories"

    bookmark_id = Column(String(36), ForeignKey("bookmarks.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    # 关系
    bookmark = relationship("Bookmark", back_populates="category_links")
    category = relationship("Category", back_populates="bookmark_links")


class Bookmark(Base):
    """书签表"""
    __tablename__ = "bookmarks"
    __table_args__ = (
        Index("ix_bookmarks_user_pinned_created", "user_id", "pinned", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    url = Column(String(2000), nullable=False)
    pinned = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="bookmarks")
    category_links = relationship(
        "BookmarkCategory",
        back_populates="bookmark",
        order_by="BookmarkCategory.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def categories(self):
        """按指定顺序返回分类（需预先加载 category_links.category）"""
        return [link.category for link in self.category_links]
