from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, asc, update, delete, or_
import logging

from freedom_wall.models.comment import Comment
from freedom_wall.schemas.comment_schema import (
    CommentCreate,
    CommentResponse,
    ThreadedCommentResponse,
    SortOption
)
from freedom_wall.services.board_view import build_threads

logger = logging.getLogger(__name__)

# Identifier tie-break keeps equal timestamps and like counts deterministic
ORDERINGS = {
    SortOption.NEWEST: (desc(Comment.created_at), desc(Comment.id)),
    SortOption.OLDEST: (asc(Comment.created_at), asc(Comment.id)),
    SortOption.MOST_LIKED: (desc(Comment.likes), desc(Comment.id)),
}

class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_comments(self, sort_by: SortOption = SortOption.NEWEST) -> List[Comment]:
        """Select every comment ordered by the given sort key"""
        stmt = select(Comment).order_by(*ORDERINGS[SortOption(sort_by)])
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_threads(
        self,
        sort_by: SortOption = SortOption.NEWEST
    ) -> List[ThreadedCommentResponse]:
        """Get the board as top-level threads with their replies"""
        comments = await self.list_comments(sort_by)
        return build_threads([CommentResponse.model_validate(c) for c in comments])

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        """Get a comment by ID"""
        stmt = select(Comment).where(Comment.id == comment_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_comment(self, comment_data: CommentCreate) -> Comment:
        """Create a new comment or reply"""
        try:
            if comment_data.parent_id is not None:
                parent = await self.get_comment(comment_data.parent_id)

                if not parent:
                    raise ValueError("Parent comment not found")
                if parent.parent_id is not None:
                    raise ValueError("Replies cannot be replied to")

            comment = Comment(
                message=comment_data.message,
                image_url=comment_data.image_url,
                parent_id=comment_data.parent_id,
                likes=0
            )

            self.db.add(comment)
            await self.db.commit()
            await self.db.refresh(comment)

            logger.info(f"Created comment {comment.id} (parent={comment.parent_id})")

            return comment

        except Exception as e:
            logger.error(f"Error creating comment: {e}")
            await self.db.rollback()
            raise

    async def delete_comment(self, comment_id: int) -> List[int]:
        """Delete a comment together with its direct replies, returning the removed ids"""
        try:
            comment = await self.get_comment(comment_id)
            if not comment:
                raise ValueError("Comment not found")

            condition = or_(Comment.id == comment_id, Comment.parent_id == comment_id)
            result = await self.db.execute(select(Comment.id).where(condition))
            deleted_ids = sorted(result.scalars().all())

            await self.db.execute(delete(Comment).where(condition))
            await self.db.commit()

            logger.info(f"Deleted comment {comment_id} ({len(deleted_ids)} rows)")

            return deleted_ids

        except Exception as e:
            logger.error(f"Error deleting comment: {e}")
            await self.db.rollback()
            raise

    async def increment_likes(self, comment_id: int) -> int:
        """Atomically add one like and return the stored count"""
        try:
            update_stmt = update(Comment).where(
                Comment.id == comment_id
            ).values(
                likes=Comment.likes + 1
            )

            result = await self.db.execute(update_stmt)
            if result.rowcount == 0:
                raise ValueError("Comment not found")

            await self.db.commit()

            count_stmt = select(Comment.likes).where(Comment.id == comment_id)
            likes = (await self.db.execute(count_stmt)).scalar_one()

            logger.debug(f"Comment {comment_id} now has {likes} likes")

            return likes

        except Exception as e:
            logger.error(f"Error liking comment: {e}")
            await self.db.rollback()
            raise
