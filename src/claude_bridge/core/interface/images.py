"""Image reference resolution — turns ``image_url`` parts into base64 sources.

The Messages API takes images as ``{"type": "base64", "media_type", "data"}``
sources. ``data:`` URLs are decoded in place; remote URLs are downloaded with
httpx and re-encoded.
"""

import base64
import logging
from typing import Any, Protocol

import httpx

from claude_bridge.core.interface.errors import InputError

logger = logging.getLogger(__name__)

SUPPORTED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class ImageResolver(Protocol):
    """Resolve an image URL into a provider image source."""

    async def resolve(self, url: str) -> dict[str, Any]: ...


def parse_data_url(url: str) -> dict[str, Any]:
    """Convert a ``data:<media>;base64,<data>`` URL into a base64 source.

    Raises:
        InputError: If the URL is malformed or the media type is unsupported.
    """
    try:
        header, data = url.split(",", 1)
    except ValueError:
        raise InputError(f"Invalid image data URL: {url[:50]}...") from None

    meta = header.removeprefix("data:").split(";")
    media_type = meta[0]
    if "base64" not in meta[1:]:
        raise InputError("Image data URLs must be base64 encoded.")
    if media_type not in SUPPORTED_MEDIA_TYPES:
        raise InputError(
            f"Unsupported image media type '{media_type}'. "
            f"Supported types: {', '.join(sorted(SUPPORTED_MEDIA_TYPES))}."
        )
    return {"type": "base64", "media_type": media_type, "data": data.strip()}


class HttpImageResolver:
    """Resolves ``data:`` URLs locally and downloads everything else.

    A shared ``httpx.AsyncClient`` may be supplied; otherwise a short-lived
    client is opened per download.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    async def resolve(self, url: str) -> dict[str, Any]:
        if url.startswith("data:"):
            return parse_data_url(url)
        return await self._download(url)

    async def _download(self, url: str) -> dict[str, Any]:
        logger.debug("Downloading image %s", url)
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise InputError(f"Could not download image from {url}: {exc}") from exc

        media_type = response.headers.get("content-type", "").split(";")[0].strip()
        if media_type not in SUPPORTED_MEDIA_TYPES:
            raise InputError(
                f"Image at {url} has unsupported content type '{media_type or 'unknown'}'."
            )
        return {
            "type": "base64",
            "media_type": media_type,
            "data": base64.b64encode(response.content).decode("ascii"),
        }
