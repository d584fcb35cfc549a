"""
Models package for Freedom Wall
"""
from freedom_wall.db.base import Base, BaseModel
from freedom_wall.models.comment import Comment

__all__ = [
    'Base',
    'BaseModel',
    'Comment',
]
