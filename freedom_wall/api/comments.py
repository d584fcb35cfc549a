from fastapi import APIRouter, Depends, HTTPException, Request, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from freedom_wall.config import settings
from freedom_wall.schemas.comment_schema import (
    CommentCreate,
    CommentResponse,
    CommentBoardResponse,
    LikeResponse,
    SortOption
)
from freedom_wall.services.comment_service import CommentService
from freedom_wall.services.board_view import filter_threads, empty_state_message
from freedom_wall.db.session import get_db
from freedom_wall.utils.rate_limit import limiter
from freedom_wall.websocket.manager import ws_manager

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[CommentResponse])
async def list_comments(
    sort_by: SortOption = Query(SortOption.NEWEST),
    db: AsyncSession = Depends(get_db)
):
    """Get every comment, flat, in the requested order"""
    try:
        comment_service = CommentService(db)
        return await comment_service.list_comments(sort_by)
    except Exception as e:
        logger.error(f"Error listing comments: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load comments"
        )

@router.get("/board", response_model=CommentBoardResponse)
async def get_board(
    sort_by: SortOption = Query(SortOption.NEWEST),
    search: str = Query("", max_length=settings.MAX_MESSAGE_LENGTH),
    db: AsyncSession = Depends(get_db)
):
    """Get the threaded board, filtered by an optional search string"""
    try:
        comment_service = CommentService(db)
        threads = await comment_service.get_threads(sort_by)
        visible = filter_threads(threads, search)

        return CommentBoardResponse(
            comments=visible,
            total=len(threads),
            sort_by=sort_by,
            search=search,
            empty_state=empty_state_message(visible, search)
        )
    except Exception as e:
        logger.error(f"Error building board: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load comments"
        )

@router.post("", response_model=CommentResponse)
@limiter.limit(settings.COMMENT_RATE_LIMIT)
async def create_comment(
    request: Request,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Post a new comment, or a reply when parent_id is set"""
    try:
        comment_service = CommentService(db)

        if comment_data.parent_id is not None:
            parent = await comment_service.get_comment(comment_data.parent_id)
            if not parent:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Parent comment not found"
                )

        comment = await comment_service.create_comment(comment_data)
        response = CommentResponse.model_validate(comment)

        await ws_manager.broadcast_comment_event("created", response.model_dump(mode="json"))

        return response

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error creating comment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to post comment"
        )

@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Delete a comment"""
    try:
        comment_service = CommentService(db)

        comment = await comment_service.get_comment(comment_id)
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Comment not found"
            )

        deleted_ids = await comment_service.delete_comment(comment_id)
        reply_ids = [deleted_id for deleted_id in deleted_ids if deleted_id != comment_id]

        await ws_manager.broadcast_comment_event(
            "deleted", {"id": comment_id, "reply_ids": reply_ids}
        )

        return {"message": "Comment deleted successfully", "deleted": len(deleted_ids)}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting comment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete comment"
        )

@router.post("/{comment_id}/like", response_model=LikeResponse)
async def like_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Add one like to a comment"""
    try:
        comment_service = CommentService(db)

        comment = await comment_service.get_comment(comment_id)
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Comment not found"
            )

        likes = await comment_service.increment_likes(comment_id)

        await ws_manager.broadcast_comment_event("liked", {"id": comment_id, "likes": likes})

        return LikeResponse(comment_id=comment_id, likes=likes)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error liking comment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to like comment"
        )
