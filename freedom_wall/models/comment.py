from sqlalchemy import Column, Text, String, Integer, ForeignKey, Index
from freedom_wall.db.base import BaseModel

class Comment(BaseModel):
    __tablename__ = "comments"

    message = Column(Text, nullable=False)
    image_url = Column(String(1024), nullable=True)
    # Replies point at a top-level comment; replies are never parents
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    likes = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index('ix_comments_parent_id', 'parent_id'),
        Index('ix_comments_created_at', 'created_at'),
        Index('ix_comments_likes', 'likes'),
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, parent_id={self.parent_id}, likes={self.likes})>"
