"""
Blog endpoint client.

The blog sheet is fronted by a reverse proxy that forwards to an Apps
Script. Reads are ``GET ?action=list``; every write is a JSON POST whose
``action`` field selects the operation. Unlike the submission sources,
blog failures are raised to the caller.

Writes are not idempotent and are sent once, without retries.
"""

import base64
import mimetypes
import re
import time
from pathlib import PurePath
from typing import Any

import structlog
from pydantic import ValidationError

from formdesk.blogs.schemas import BlogDraft, BlogPost
from formdesk.blogs.thumbnails import compress_thumbnail
from formdesk.errors import FormdeskError
from formdesk.ingestion.http_client import HTTPClient

logger = structlog.get_logger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
DRIVE_ID_LENGTH = 33

_DRIVE_ID_PARAM = re.compile(r"[&?]id=([^&]+)")


class BlogClientError(FormdeskError):
    """Raised when a blog operation fails or returns an unusable body."""


def drive_view_url(url: str | None) -> str | None:
    """
    Convert a Google Drive download link into a view link.

    View links pass through; ``...?id=FILE_ID`` and bare 33-character ids
    become ``https://drive.google.com/file/d/FILE_ID/view``; anything else
    is returned unchanged.
    """
    if not url:
        return url
    if "/file/d/" in url and "/view" in url:
        return url

    match = _DRIVE_ID_PARAM.search(url)
    file_id = match.group(1) if match else None
    if file_id is None and len(url) == DRIVE_ID_LENGTH:
        file_id = url

    return f"https://drive.google.com/file/d/{file_id}/view" if file_id else url


class BlogClient:
    """
    Usage:
        async with HTTPClient() as http:
            blogs = BlogClient(settings.blog_api_url, http)
            posts = await blogs.list_posts()
    """

    def __init__(self, base_url: str, http: HTTPClient):
        self._base_url = base_url
        self._http = http

    async def list_posts(self) -> list[BlogPost]:
        try:
            response = await self._http.get(self._base_url, params={"action": "list"})
            payload = response.json()
        except Exception as e:
            logger.error("Failed to list blog posts", error=str(e))
            raise BlogClientError(f"Failed to list blog posts: {e}") from e

        if not isinstance(payload, list):
            raise BlogClientError("Expected a JSON array of blog posts")
        try:
            return [BlogPost.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.error("Unreadable blog post row", errors=e.error_count())
            raise BlogClientError(f"Invalid blog post data: {e}") from e

    async def get_post(self, post_id: str) -> BlogPost:
        for post in await self.list_posts():
            if post.id == post_id:
                return post
        raise BlogClientError(f"Blog post {post_id} not found")

    async def _post(self, action: str, data: dict[str, Any]) -> Any:
        try:
            response = await self._http.post(
                self._base_url,
                json_body={"action": action, **data},
                max_retries=0,
            )
            return response.json()
        except Exception as e:
            logger.error("Blog action failed", action=action, error=str(e))
            raise BlogClientError(f"Error in {action}: {e}") from e

    async def create_post(self, draft: BlogDraft) -> Any:
        return await self._post("createPost", draft.to_payload())

    async def update_post(self, post_id: str, draft: BlogDraft) -> Any:
        return await self._post("updatePost", {"id": post_id, **draft.to_payload()})

    async def delete_post(self, post_id: str) -> Any:
        return await self._post("delete", {"id": post_id})

    async def upload_image(self, data: bytes, file_name: str) -> str:
        """
        Upload an image and return its Drive view URL.

        Raises:
            ValueError: If the image is larger than 5 MB
            BlogClientError: If the upload fails or returns no URL
        """
        if len(data) > MAX_IMAGE_BYTES:
            raise ValueError("Image must be smaller than 5MB")

        mime_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        encoded = base64.b64encode(data).decode("ascii")
        result = await self._post(
            "uploadImage",
            {"base64": f"data:{mime_type};base64,{encoded}", "fileName": file_name},
        )

        url = result.get("url") if isinstance(result, dict) else None
        if not url:
            raise BlogClientError("Image upload returned no URL")
        return drive_view_url(url)

    async def upload_thumbnail(self, data: bytes, file_name: str) -> tuple[str, str]:
        """
        Upload a thumbnail and its 150x150 JPEG copy.

        Returns:
            ``(thumbnail_url, thumbnail_small_url)`` as Drive view links
        """
        if len(data) > MAX_IMAGE_BYTES:
            raise ValueError("Image must be smaller than 5MB")
        small = compress_thumbnail(data)

        stamp = int(time.time() * 1000)
        suffix = PurePath(file_name).suffix or ".jpg"
        full_url = await self.upload_image(data, f"thumbnail-{stamp}{suffix}")
        small_url = await self.upload_image(small, f"thumbnail-small-{stamp}.jpg")
        return full_url, small_url
