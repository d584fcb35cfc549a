"""
Client-side state of one board view.

``BoardSession`` owns the last fetched snapshot together with the view state
(sort key, search text, dark mode, reply target) and runs every user action
against the store. Failures are logged and reported through the notifier;
they never escape a session call, so the view stays usable.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from freedom_wall.client.notifications import Notifier
from freedom_wall.client.share import ShareResult, ShareService
from freedom_wall.client.store_client import ImageAttachment, StoreClientError, WallStoreClient
from freedom_wall.schemas.comment_schema import (
    CommentResponse,
    SortOption,
    ThreadedCommentResponse
)
from freedom_wall.services.board_view import (
    apply_like,
    build_threads,
    empty_state_message,
    filter_threads,
    remove_comment
)
from freedom_wall.utils.validation import (
    CommentValidationError,
    validate_image_type,
    validate_message
)

logger = logging.getLogger(__name__)

REMOTE_ERRORS = (httpx.HTTPError, StoreClientError)


@dataclass
class BoardState:
    sort_by: SortOption = SortOption.NEWEST
    search: str = ""
    dark_mode: bool = False
    replying_to: Optional[int] = None


class BoardSession:
    def __init__(
        self,
        store: WallStoreClient,
        notifier: Optional[Notifier] = None,
        sharer: Optional[ShareService] = None,
        state: Optional[BoardState] = None
    ):
        self.store = store
        self.notifier = notifier or Notifier()
        self.sharer = sharer or ShareService.from_settings()
        self.state = state or BoardState()
        self.threads: List[ThreadedCommentResponse] = []
        self.loading = True
        self.is_submitting = False

    @property
    def visible_threads(self) -> List[ThreadedCommentResponse]:
        return filter_threads(self.threads, self.state.search)

    @property
    def empty_state(self) -> Optional[str]:
        return empty_state_message(self.visible_threads, self.state.search)

    async def refresh(self) -> bool:
        """Replace the snapshot with a fresh fetch in the current order"""
        try:
            comments = await self.store.fetch_comments(self.state.sort_by)
            self.threads = build_threads(comments)
            return True
        except REMOTE_ERRORS as e:
            logger.error(f"Error fetching comments: {e}")
            self.notifier.error("Failed to load comments")
            return False
        finally:
            self.loading = False

    async def set_sort(self, sort_by: SortOption) -> bool:
        self.state.sort_by = SortOption(sort_by)
        return await self.refresh()

    def set_search(self, text: str) -> None:
        self.state.search = text

    def toggle_dark_mode(self) -> bool:
        self.state.dark_mode = not self.state.dark_mode
        return self.state.dark_mode

    def start_reply(self, comment_id: int) -> Optional[int]:
        """Toggle the reply form under a top-level comment"""
        if not any(thread.id == comment_id for thread in self.threads):
            raise ValueError(f"Comment {comment_id} is not a top-level comment")

        self.state.replying_to = None if self.state.replying_to == comment_id else comment_id
        return self.state.replying_to

    def cancel_reply(self) -> None:
        self.state.replying_to = None

    async def post_comment(self, message: str, image: Optional[ImageAttachment] = None) -> bool:
        """
        Validate, upload the image if any, insert and refetch.

        The comment becomes a reply when a reply target is set. Nothing is
        sent when validation fails or another post is still in flight.
        """
        if self.is_submitting:
            return False

        try:
            validate_message(message)
            if image is not None:
                validate_image_type(image.content_type)
        except CommentValidationError as e:
            self.notifier.error(str(e))
            return False

        self.is_submitting = True
        try:
            image_url = await self.store.upload_image(image) if image is not None else None
            await self.store.insert_comment(
                message,
                image_url=image_url,
                parent_id=self.state.replying_to
            )
        except REMOTE_ERRORS as e:
            logger.error(f"Error posting comment: {e}")
            self.notifier.error("Failed to post comment. Please try again.")
            return False
        finally:
            self.is_submitting = False

        self.state.replying_to = None
        await self.refresh()
        self.notifier.success("Comment posted successfully!")
        return True

    async def like(self, comment_id: int) -> bool:
        """Increment remotely, then patch the local count without refetching"""
        try:
            await self.store.increment_likes(comment_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error liking comment: {e}")
            self.notifier.error("Failed to like comment")
            return False

        self.threads = apply_like(self.threads, comment_id)
        return True

    async def delete(self, comment_id: int) -> bool:
        try:
            await self.store.delete_comment(comment_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error deleting comment: {e}")
            self.notifier.error("Failed to delete comment")
            return False

        self.threads = remove_comment(self.threads, comment_id)
        if self.state.replying_to == comment_id:
            self.state.replying_to = None
        self.notifier.success("Comment deleted successfully")
        return True

    async def share(self, comment: CommentResponse) -> ShareResult:
        result = await self.sharer.share_comment(comment)
        if result.success:
            self.notifier.success(result.message)
        else:
            self.notifier.error(result.message)
        return result

    async def aclose(self) -> None:
        """Close the store client and any share target this session created"""
        await self.store.aclose()
        await self.sharer.aclose()

    async def __aenter__(self) -> "BoardSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def find_comment(self, comment_id: int) -> Optional[CommentResponse]:
        for thread in self.threads:
            if thread.id == comment_id:
                return thread
            for reply in thread.replies:
                if reply.id == comment_id:
                    return reply
        return None
