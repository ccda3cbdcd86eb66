"""
Media Binder - Image URLs for dimension-0 option values.

The upload service is an adapter so the binder never knows how files are
stored. Only dimension 0 carries images; the table shows one thumbnail
per dimension-0 row group.
"""

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Mapping

from .errors import MediaBindingError, UploadError
from .models import DimensionShape, MatrixState

logger = logging.getLogger(__name__)


class UploadService(ABC):
    """
    Abstract interface for file uploads.

    Implementations take raw bytes and return a public URL, raising
    UploadError when the file could not be stored.
    """

    @abstractmethod
    async def upload_file(self, blob: bytes, filename: str = "") -> str:
        """
        Store a file.

        Args:
            blob: File contents
            filename: Original filename, if known

        Returns:
            Public URL of the stored file
        """
        pass


class InMemoryUploadService(UploadService):
    """
    In-memory upload service for tests and local previews.

    URLs are derived from a content hash so the same bytes give the same URL.
    """

    def __init__(self, base_url: str = "memory://uploads"):
        self.base_url = base_url.rstrip("/")
        self.files: dict[str, bytes] = {}
        self.fail_with: str | None = None

    async def upload_file(self, blob: bytes, filename: str = "") -> str:
        if self.fail_with:
            raise UploadError(self.fail_with)
        if not blob:
            raise UploadError("Cannot upload an empty file")

        digest = hashlib.sha256(blob).hexdigest()[:16]
        suffix = ""
        if "." in filename:
            suffix = "." + filename.rsplit(".", 1)[1].lower()

        url = f"{self.base_url}/{digest}{suffix}"
        self.files[url] = blob
        return url

    def clear(self):
        """Remove all stored files."""
        self.files = {}


def image_options(state: MatrixState) -> tuple[str, ...]:
    """Option values that may carry an image (dimension 0 only)."""
    if state.shape == DimensionShape.ZERO:
        return ()
    return state.dimensions[0].options


def bind_image(state: MatrixState, option: str, url: str) -> MatrixState:
    """
    Associate an image URL with a dimension-0 option value.

    Raises:
        MediaBindingError: option is not a dimension-0 value
    """
    if option not in image_options(state):
        raise MediaBindingError(f"'{option}' is not an option of the first variation")

    media = dict(state.media)
    media[option] = url
    return replace(state, media=media)


def unbind_image(state: MatrixState, option: str) -> MatrixState:
    """Drop the image for an option value, if any."""
    if option not in state.media:
        return state
    media = dict(state.media)
    del media[option]
    return replace(state, media=media)


def prune_media(media: Mapping[str, str], options: tuple[str, ...]) -> dict[str, str]:
    """Keep only entries whose key is one of the given option values."""
    return {option: url for option, url in media.items() if option in options}
