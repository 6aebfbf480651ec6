"""Post model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base
from services.validation import CAPTION_MAX_LENGTH


class Post(Base):
    """Image post with a caption, owned by a single user."""

    __tablename__ = "posts"

    post_id = Column(Integer, primary_key=True, autoincrement=True)
    post_image_path = Column(String, nullable=True)
    caption = Column(String(CAPTION_MAX_LENGTH), nullable=False)
    post_date = Column(String, nullable=True, index=True)  # ISO-8601 UTC
    user_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post", passive_deletes=True)
    likes = relationship("Like", back_populates="post", passive_deletes=True)
