"""Async image host client."""

import asyncio
import base64
from collections.abc import Iterable
from typing import TYPE_CHECKING

from staybook.clients.images import UPLOAD_PATH, ImageSource, UploadBatch, read_image
from staybook.exceptions import RemoteRejection, StayBookError
from staybook.logging import get_logger

if TYPE_CHECKING:
    from staybook.async_transport import AsyncHTTPTransport

logger = get_logger("images")


class AsyncImagesClient:
    """Async client for the image upload API."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def upload(self, source: ImageSource) -> str:
        """
        Upload one image.

        Returns:
            Public URL of the uploaded image
        """
        payload = {
            "image": base64.b64encode(read_image(source)).decode("ascii"),
            "type": "base64",
        }
        response = await self.transport.request("POST", UPLOAD_PATH, body=payload)
        link = ((response or {}).get("data") or {}).get("link")
        if not link:
            raise RemoteRejection("NO_LINK", "Image host returned no link")
        return link

    async def upload_many(self, sources: Iterable[ImageSource]) -> UploadBatch:
        """
        Upload several images concurrently, keeping every success.

        URLs come back in the order of ``sources``.
        """
        sources = list(sources)
        results = await asyncio.gather(
            *(self.upload(source) for source in sources), return_exceptions=True
        )
        batch = UploadBatch()
        for index, result in enumerate(results):
            if isinstance(result, StayBookError):
                logger.warning("Image %d failed to upload: %s", index, result)
                batch.failures.append((index, result))
            elif isinstance(result, BaseException):
                raise result
            else:
                batch.urls.append(result)
        return batch
