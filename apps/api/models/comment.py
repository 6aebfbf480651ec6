"""Comment model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database import Base
from services.validation import COMMENT_MAX_LENGTH


class Comment(Base):
    """Text comment left by a user on a post."""

    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    comment_text = Column(String(COMMENT_MAX_LENGTH), nullable=False)
    comment_date = Column(String, nullable=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.post_id"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")
