"""Small JPEG thumbnails for blog post listings."""

import io

from PIL import Image, UnidentifiedImageError

THUMBNAIL_MAX_SIZE = (150, 150)
THUMBNAIL_QUALITY = 70


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale ``width x height`` down to fit the box, keeping the aspect ratio.

    Images already inside the box are left at their size.
    """
    if width <= max_width and height <= max_height:
        return width, height
    if width / height > max_width / max_height:
        return max_width, round(height * max_width / width)
    return round(width * max_height / height), max_height


def compress_thumbnail(
    data: bytes,
    max_size: tuple[int, int] = THUMBNAIL_MAX_SIZE,
    quality: int = THUMBNAIL_QUALITY,
) -> bytes:
    """
    Re-encode an image as a JPEG no larger than ``max_size``.

    Raises:
        ValueError: If ``data`` is not an image Pillow can read
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            size = fit_within(image.width, image.height, *max_size)
            small = image.convert("RGB").resize(size, Image.Resampling.LANCZOS)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Thumbnail is not a readable image: {e}") from e

    buffer = io.BytesIO()
    small.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()
