"""Tests for the blog endpoint client."""

import base64
import io
import json

import httpx
import pytest
import respx
from PIL import Image

from formdesk.blogs.client import (
    MAX_IMAGE_BYTES,
    BlogClient,
    BlogClientError,
    drive_view_url,
)
from formdesk.blogs.schemas import BlogDraft, BlogPost
from formdesk.blogs.thumbnails import compress_thumbnail, fit_within
from formdesk.ingestion.http_client import HTTPClient, RetryConfig

BLOG_URL = "https://gas-proxy.example.workers.dev"
FILE_ID = "1AbCdEfGhIjKlMnOpQrStUvWxYz012345"


def _http() -> HTTPClient:
    return HTTPClient(RetryConfig(max_retries=0))


def _sent_json(route) -> dict:
    return json.loads(route.calls.last.request.content)


class TestDriveViewUrl:
    def test_download_link(self):
        url = f"https://drive.google.com/uc?export=view&id={FILE_ID}"
        assert drive_view_url(url) == f"https://drive.google.com/file/d/{FILE_ID}/view"

    def test_view_link_unchanged(self):
        url = f"https://drive.google.com/file/d/{FILE_ID}/view"
        assert drive_view_url(url) == url

    def test_bare_file_id(self):
        assert len(FILE_ID) == 33
        assert drive_view_url(FILE_ID) == f"https://drive.google.com/file/d/{FILE_ID}/view"

    def test_other_urls_unchanged(self):
        assert drive_view_url("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert drive_view_url(value) == value


class TestBlogSchemas:
    def test_post_from_sheet_columns(self):
        post = BlogPost.model_validate(
            {"ID": 7, "Title": "Tax season", "Author": "CA Team", "Content": "# Hi", "Views": 12}
        )

        assert post.id == "7"
        assert post.title == "Tax season"
        assert post.thumbnail_url == ""

    def test_draft_payload_keys(self):
        draft = BlogDraft(title="T", author="A", content="C", thumbnail_url="u")

        assert draft.to_payload() == {
            "title": "T",
            "author": "A",
            "content": "C",
            "thumbnailUrl": "u",
            "thumbnailSmallUrl": "",
        }


class TestBlogClient:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_posts(self):
        route = respx.get(BLOG_URL).mock(
            return_value=httpx.Response(200, json=[{"ID": "1", "Title": "First"}, {"ID": "2"}])
        )

        async with _http() as http:
            posts = await BlogClient(BLOG_URL, http).list_posts()

        assert "action=list" in str(route.calls.last.request.url)
        assert [p.id for p in posts] == ["1", "2"]
        assert posts[0].title == "First"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_posts_http_error(self):
        respx.get(BLOG_URL).mock(return_value=httpx.Response(500))

        async with _http() as http:
            with pytest.raises(BlogClientError, match="Failed to list blog posts"):
                await BlogClient(BLOG_URL, http).list_posts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_posts_rejects_non_array(self):
        respx.get(BLOG_URL).mock(return_value=httpx.Response(200, json={"error": "denied"}))

        async with _http() as http:
            with pytest.raises(BlogClientError, match="Expected a JSON array"):
                await BlogClient(BLOG_URL, http).list_posts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_post(self):
        route = respx.post(BLOG_URL).mock(return_value=httpx.Response(200, json={"success": True}))

        async with _http() as http:
            result = await BlogClient(BLOG_URL, http).create_post(
                BlogDraft(title="New", author="Me", content="Body")
            )

        assert result == {"success": True}
        sent = _sent_json(route)
        assert sent["action"] == "createPost"
        assert sent["title"] == "New"
        assert sent["thumbnailUrl"] == ""

    @pytest.mark.asyncio
    @respx.mock
    async def test_update_post(self):
        route = respx.post(BLOG_URL).mock(return_value=httpx.Response(200, json={"success": True}))

        async with _http() as http:
            await BlogClient(BLOG_URL, http).update_post("7", BlogDraft(title="Edited", author="Me"))

        sent = _sent_json(route)
        assert sent["action"] == "updatePost"
        assert sent["id"] == "7"
        assert sent["title"] == "Edited"

    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_post(self):
        route = respx.post(BLOG_URL).mock(return_value=httpx.Response(200, json={"success": True}))

        async with _http() as http:
            await BlogClient(BLOG_URL, http).delete_post("7")

        assert _sent_json(route) == {"action": "delete", "id": "7"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_write_error_names_action(self):
        respx.post(BLOG_URL).mock(return_value=httpx.Response(403))

        async with _http() as http:
            with pytest.raises(BlogClientError, match="Error in delete"):
                await BlogClient(BLOG_URL, http).delete_post("7")

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_image(self):
        route = respx.post(BLOG_URL).mock(
            return_value=httpx.Response(
                200, json={"url": f"https://drive.google.com/uc?export=view&id={FILE_ID}"}
            )
        )

        async with _http() as http:
            url = await BlogClient(BLOG_URL, http).upload_image(b"\x89PNG-bytes", "cover.png")

        assert url == f"https://drive.google.com/file/d/{FILE_ID}/view"
        sent = _sent_json(route)
        assert sent["action"] == "uploadImage"
        assert sent["fileName"] == "cover.png"
        prefix, encoded = sent["base64"].split(",", 1)
        assert prefix == "data:image/png;base64"
        assert base64.b64decode(encoded) == b"\x89PNG-bytes"

    @pytest.mark.asyncio
    async def test_upload_image_too_large(self):
        async with _http() as http:
            with pytest.raises(ValueError, match="smaller than 5MB"):
                await BlogClient(BLOG_URL, http).upload_image(b"x" * (MAX_IMAGE_BYTES + 1), "big.jpg")

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_image_without_url(self):
        respx.post(BLOG_URL).mock(return_value=httpx.Response(200, json={"success": False}))

        async with _http() as http:
            with pytest.raises(BlogClientError, match="no URL"):
                await BlogClient(BLOG_URL, http).upload_image(b"img", "a.png")

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_posts_invalid_row(self):
        respx.get(BLOG_URL).mock(return_value=httpx.Response(200, json=[{"ID": 1, "Title": None}]))

        async with _http() as http:
            with pytest.raises(BlogClientError, match="Invalid blog post data"):
                await BlogClient(BLOG_URL, http).list_posts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_post(self):
        respx.get(BLOG_URL).mock(
            return_value=httpx.Response(200, json=[{"ID": "1"}, {"ID": "7", "Title": "Tax season"}])
        )

        async with _http() as http:
            client = BlogClient(BLOG_URL, http)
            post = await client.get_post("7")
            with pytest.raises(BlogClientError, match="Blog post 9 not found"):
                await client.get_post("9")

        assert post.title == "Tax season"

    @pytest.mark.asyncio
    @respx.mock
    async def test_writes_are_sent_once(self):
        route = respx.post(BLOG_URL).mock(return_value=httpx.Response(502))

        async with HTTPClient(RetryConfig(max_retries=3, base_delay=0.0)) as http:
            with pytest.raises(BlogClientError, match="Error in createPost"):
                await BlogClient(BLOG_URL, http).create_post(BlogDraft(title="Once", author="Me"))

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_thumbnail_sends_small_copy(self):
        small_id = FILE_ID[::-1]
        route = respx.post(BLOG_URL).mock(
            side_effect=[
                httpx.Response(200, json={"url": f"https://drive.google.com/uc?export=view&id={FILE_ID}"}),
                httpx.Response(200, json={"url": f"https://drive.google.com/uc?export=view&id={small_id}"}),
            ]
        )

        async with _http() as http:
            urls = await BlogClient(BLOG_URL, http).upload_thumbnail(_png(600, 300), "cover.png")

        assert urls == (
            f"https://drive.google.com/file/d/{FILE_ID}/view",
            f"https://drive.google.com/file/d/{small_id}/view",
        )
        full, small = (json.loads(call.request.content) for call in route.calls)
        assert full["fileName"].startswith("thumbnail-") and full["fileName"].endswith(".png")
        assert small["fileName"].startswith("thumbnail-small-") and small["fileName"].endswith(".jpg")
        prefix, encoded = small["base64"].split(",", 1)
        assert prefix == "data:image/jpeg;base64"
        with Image.open(io.BytesIO(base64.b64decode(encoded))) as image:
            assert image.size == (150, 75)

    @pytest.mark.asyncio
    async def test_upload_thumbnail_rejects_non_image(self):
        async with _http() as http:
            with pytest.raises(ValueError, match="not a readable image"):
                await BlogClient(BLOG_URL, http).upload_thumbnail(b"plain text", "notes.png")


def _png(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestThumbnails:
    @pytest.mark.parametrize(
        "size,expected",
        [
            ((300, 150), (150, 75)),
            ((100, 300), (50, 150)),
            ((100, 100), (100, 100)),
            ((150, 150), (150, 150)),
        ],
    )
    def test_fit_within(self, size, expected):
        assert fit_within(*size, 150, 150) == expected

    def test_compress_to_jpeg(self):
        data = compress_thumbnail(_png(600, 300))

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "JPEG"
            assert image.size == (150, 75)

    def test_small_images_keep_their_size(self):
        with Image.open(io.BytesIO(compress_thumbnail(_png(40, 20)))) as image:
            assert image.size == (40, 20)

    def test_unreadable_data(self):
        with pytest.raises(ValueError, match="not a readable image"):
            compress_thumbnail(b"\x00\x01garbage")
