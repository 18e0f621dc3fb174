from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

PREVIEW_LENGTH = 200


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    preview = Column(Text, nullable=False)
    location = Column(String(150), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)
    publish_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    author = relationship("User", back_populates="blogs", lazy="joined")
    likes = relationship("Like", back_populates="blog", cascade="all, delete-orphan")
    wishlists = relationship("Wishlist", back_populates="blog", cascade="all, delete-orphan")

    @staticmethod
    def build_preview(content: str) -> str:
        content = content.strip()
        if len(content) > PREVIEW_LENGTH:
            return content[:PREVIEW_LENGTH] + "..."
        return content
