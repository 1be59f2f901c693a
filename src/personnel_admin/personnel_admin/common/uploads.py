from __future__ import annotations

import base64

from ..core.constants import MAX_PHOTO_BYTES
from ..core.exceptions import UploadError


def validate_photo(*, content_type: str, size: int, max_bytes: int = MAX_PHOTO_BYTES) -> None:
    """Reject non-images and oversized files before anything is stored."""
    if not content_type or not content_type.startswith("image/"):
        raise UploadError("Please select a valid image file")
    if size > max_bytes:
        raise UploadError(f"The image must be smaller than {max_bytes // (1024 * 1024)}MB")


def photo_to_data_url(content: bytes, content_type: str) -> str:
    validate_photo(content_type=content_type, size=len(content))
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"
