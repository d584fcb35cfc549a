"""
HTTP client for the Freedom Wall store.

Thin pass-through calls: no retries, no caching, default httpx timeouts.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx
from pydantic import ValidationError

from freedom_wall.config import settings
from freedom_wall.schemas.comment_schema import CommentResponse, SortOption

logger = logging.getLogger(__name__)


class StoreClientError(Exception):
    """The store answered with an error status or an unreadable body"""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


@dataclass
class ImageAttachment:
    filename: str
    content: bytes
    content_type: str


class WallStoreClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        bucket: Optional[str] = None
    ):
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(base_url=base_url or settings.API_BASE_URL)
        self.bucket = bucket or settings.DEFAULT_BUCKET
        self.prefix = settings.API_V1_PREFIX

    async def fetch_comments(self, sort_by: SortOption = SortOption.NEWEST) -> List[CommentResponse]:
        data = await self._request(
            "GET", f"{self.prefix}/comments", params={"sort_by": SortOption(sort_by).value}
        )
        if not isinstance(data, list):
            raise StoreClientError(200, "Expected a list of comments")
        return [self._parse_comment(item) for item in data]

    async def insert_comment(
        self,
        message: str,
        image_url: Optional[str] = None,
        parent_id: Optional[int] = None
    ) -> CommentResponse:
        data = await self._request(
            "POST",
            f"{self.prefix}/comments",
            json={"message": message, "image_url": image_url, "parent_id": parent_id},
        )
        return self._parse_comment(data)

    async def delete_comment(self, comment_id: int) -> None:
        await self._request("DELETE", f"{self.prefix}/comments/{comment_id}")

    async def increment_likes(self, comment_id: int) -> int:
        data = await self._request("POST", f"{self.prefix}/comments/{comment_id}/like")
        return self._field(data, "likes")

    async def upload_image(self, image: ImageAttachment) -> str:
        """Upload an image and return its public URL"""
        stored = await self._request(
            "POST",
            f"{self.prefix}/storage/{self.bucket}",
            files={"file": (image.filename, image.content, image.content_type)},
        )
        name = self._field(stored, "name")
        resolved = await self._request(
            "GET", f"{self.prefix}/storage/{self.bucket}/{name}/public-url"
        )
        return self._field(resolved, "public_url")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs):
        response = await self.http.request(method, url, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except (ValueError, AttributeError):
                detail = response.text
            raise StoreClientError(response.status_code, str(detail))
        try:
            return response.json()
        except ValueError:
            logger.error(f"Unreadable response from {method} {url}")
            raise StoreClientError(response.status_code, "Response body is not JSON")

    @staticmethod
    def _parse_comment(data) -> CommentResponse:
        try:
            return CommentResponse.model_validate(data)
        except ValidationError as e:
            raise StoreClientError(200, f"Unexpected comment payload: {e.error_count()} errors")

    @staticmethod
    def _field(data, key: str):
        if not isinstance(data, dict) or key not in data:
            raise StoreClientError(200, f"Response is missing '{key}'")
        return data[key]
