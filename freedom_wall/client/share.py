"""
Best-effort sharing of comments.

A platform share capability is tried first when one is available, the
clipboard otherwise. If the platform share fails the clipboard is tried
once before giving up. Nothing here is retried.
"""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from freedom_wall.config import settings
from freedom_wall.schemas.comment_schema import CommentResponse
from freedom_wall.services.board_view import share_text

logger = logging.getLogger(__name__)

ShareCapability = Callable[[str], Awaitable[None]]

SHARED_MESSAGE = "Comment shared successfully!"
COPIED_MESSAGE = "Comment copied to clipboard!"
FAILED_MESSAGE = "Failed to share comment"


@dataclass
class ShareResult:
    success: bool
    method: Optional[str]
    message: str


class WebhookShareTarget:
    """Platform share capability that posts the text to a webhook"""

    def __init__(self, url: str, http_client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient()

    async def __call__(self, text: str) -> None:
        response = await self.http.post(self.url, json={"text": text})
        response.raise_for_status()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()


class ShareService:
    def __init__(
        self,
        share: Optional[ShareCapability] = None,
        copy: Optional[ShareCapability] = None,
        can_share: Optional[Callable[[str], bool]] = None
    ):
        self.share = share
        self.copy = copy
        self.can_share = can_share or (lambda text: True)

    @classmethod
    def from_settings(cls, copy: Optional[ShareCapability] = None) -> "ShareService":
        share = WebhookShareTarget(settings.SHARE_WEBHOOK_URL) if settings.SHARE_WEBHOOK_URL else None
        return cls(share=share, copy=copy)

    @property
    def is_share_supported(self) -> bool:
        return self.share is not None

    async def share_comment(self, comment: CommentResponse) -> ShareResult:
        text = share_text(comment)

        if self.share is not None and self.can_share(text):
            try:
                await self.share(text)
                return ShareResult(True, "share", SHARED_MESSAGE)
            except Exception as e:
                logger.warning(f"Share failed for comment {comment.id}, copying instead: {e}")

        try:
            await self._copy(text)
            return ShareResult(True, "clipboard", COPIED_MESSAGE)
        except Exception as e:
            logger.error(f"Error sharing comment {comment.id}: {e}")
            return ShareResult(False, None, FAILED_MESSAGE)

    async def aclose(self) -> None:
        close = getattr(self.share, "aclose", None)
        if close is not None:
            await close()

    async def _copy(self, text: str) -> None:
        if self.copy is None:
            raise RuntimeError("No clipboard available")
        await self.copy(text)
