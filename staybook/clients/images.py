"""Image host client.

Listing photos are stored by a third-party image host; the listing only
keeps the returned public URLs.
"""

import base64
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from staybook.exceptions import RemoteRejection, StayBookError, ValidationError
from staybook.logging import get_logger

if TYPE_CHECKING:
    from staybook.transport import HTTPTransport

logger = get_logger("images")

IMAGE_HOST_URL = "https://api.imgur.com"
UPLOAD_PATH = "/3/image"
ALLOWED_SUFFIXES = {".jpeg", ".jpg", ".png", ".webp"}

ImageSource = bytes | str | Path


@dataclass
class UploadBatch:
    """Outcome of uploading several images."""

    urls: list[str] = field(default_factory=list)
    failures: list[tuple[int, StayBookError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def read_image(source: ImageSource) -> bytes:
    """
    Load image bytes from raw bytes or a file path.

    Raises:
        ValidationError: If the image is empty, unsupported or cannot be
                         read
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if path.suffix.lower() not in ALLOWED_SUFFIXES:
            raise ValidationError(
                f"Unsupported image type: {path.suffix or path.name}",
                code="UNSUPPORTED_IMAGE",
            )
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Cannot read image {path}: {e.strerror or e}", code="UNREADABLE_IMAGE") from e
    else:
        data = source
    if not data:
        raise ValidationError("Image is empty", code="EMPTY_IMAGE")
    return data


class ImagesClient:
    """Client for the image upload API."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the images client.

        Args:
            transport: HTTP transport pointed at the image host
        """
        self.transport = transport

    def upload(self, source: ImageSource) -> str:
        """
        Upload one image.

        Args:
            source: Image bytes or a path to a .jpg/.jpeg/.png/.webp file

        Returns:
            Public URL of the uploaded image

        Raises:
            ValidationError: For empty or unsupported input
            StayBookError: If the upload fails
        """
        payload = {
            "image": base64.b64encode(read_image(source)).decode("ascii"),
            "type": "base64",
        }
        response = self.transport.request("POST", UPLOAD_PATH, body=payload)
        link = ((response or {}).get("data") or {}).get("link")
        if not link:
            raise RemoteRejection("NO_LINK", "Image host returned no link")
        return link

    def upload_many(self, sources: Iterable[ImageSource]) -> UploadBatch:
        """
        Upload several images, keeping every success.

        A failed upload is recorded in ``failures`` (with its index) and does
        not discard the URLs of the others.
        """
        batch = UploadBatch()
        for index, source in enumerate(sources):
            try:
                batch.urls.append(self.upload(source))
            except StayBookError as e:
                logger.warning("Image %d failed to upload: %s", index, e)
                batch.failures.append((index, e))
        return batch
