from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from freedom_wall.utils.validation import validate_message

class SortOption(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_LIKED = "most_liked"

class CommentCreate(BaseModel):
    message: str
    image_url: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator("message")
    @classmethod
    def check_message(cls, value: str) -> str:
        return validate_message(value)

class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    message: str
    image_url: Optional[str] = None
    parent_id: Optional[int] = None
    likes: int = 0

class ThreadedCommentResponse(CommentResponse):
    # One level only: replies are plain comments
    replies: List[CommentResponse] = []

class CommentBoardResponse(BaseModel):
    comments: List[ThreadedCommentResponse]
    total: int
    sort_by: SortOption
    search: str = ""
    empty_state: Optional[str] = None

class LikeResponse(BaseModel):
    comment_id: int
    likes: int

class StoredObjectResponse(BaseModel):
    bucket: str
    name: str
    public_url: Optional[str] = None
