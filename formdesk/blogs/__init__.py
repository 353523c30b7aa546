"""Blog post management through the blog proxy endpoint."""

from formdesk.blogs.client import BlogClient, BlogClientError, drive_view_url
from formdesk.blogs.schemas import BlogDraft, BlogPost
from formdesk.blogs.thumbnails import compress_thumbnail

__all__ = [
    "BlogClient",
    "BlogClientError",
    "BlogDraft",
    "BlogPost",
    "compress_thumbnail",
    "drive_view_url",
]
