"""Resolves data URLs, base64 payloads and remote URLs into raw file bytes."""

import base64
import binascii
import re
from pathlib import PurePosixPath
from urllib.parse import urlparse

import httpx

from complyscan.ocr.exceptions import (
    InvalidDataUrlError,
    SourceFetchError,
    UnsupportedFileTypeError,
)
from complyscan.ocr.models import SourceFile

PDF_MIME_TYPE = "application/pdf"
SUPPORTED_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)
SUPPORTED_TYPES: tuple[str, ...] = (*SUPPORTED_IMAGE_TYPES, PDF_MIME_TYPE)

_DATA_URL = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)
_EXTENSION_TYPES = {
    ".pdf": PDF_MIME_TYPE,
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def ensure_supported(mime_type: str) -> str:
    """Return the lower-cased MIME type, or raise if it is not allowed."""
    normalized = (mime_type or "").split(";")[0].strip().lower()
    if normalized not in SUPPORTED_TYPES:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {mime_type or 'unknown'}. "
            f"Supported types: {', '.join(SUPPORTED_TYPES)}"
        )
    return normalized


def decode_base64(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataUrlError(f"Invalid base64 payload: {exc}") from exc


def parse_data_url(url: str) -> SourceFile:
    """Split a ``data:<mime>;base64,<payload>`` URL into bytes and MIME type."""
    match = _DATA_URL.match(url)
    if match is None:
        raise InvalidDataUrlError("Invalid data URL format")
    mime_type = ensure_supported(match.group(1))
    return SourceFile(data=decode_base64(match.group(2)), mime_type=mime_type)


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def guess_mime_type(url: str) -> str:
    """MIME type implied by a URL: the data URL header, else the path extension."""
    if url.startswith("data:"):
        match = _DATA_URL.match(url)
        return match.group(1).lower() if match else ""
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    return _EXTENSION_TYPES.get(suffix, "")


class RemoteFileFetcher:
    """Downloads HTTP(S) documents with a size cap."""

    def __init__(self, *, timeout_seconds: int = 30, max_bytes: int = 10 * 1024 * 1024) -> None:
        self._timeout_seconds = timeout_seconds
        self._max_bytes = max_bytes

    def fetch(self, url: str) -> SourceFile:
        scheme = urlparse(url).scheme.lower()
        if scheme not in ("http", "https"):
            raise InvalidDataUrlError(f"Unsupported URL scheme: {scheme or 'none'}")
        try:
            with httpx.Client(timeout=self._timeout_seconds, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SourceFetchError(
                f"Failed to download file: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SourceFetchError(f"Failed to download file: {exc}") from exc

        if len(response.content) > self._max_bytes:
            raise SourceFetchError(
                f"Remote file exceeds {self._max_bytes // (1024 * 1024)}MB limit"
            )
        header_type = response.headers.get("content-type", "").split(";")[0].strip()
        mime_type = header_type if header_type in SUPPORTED_TYPES else guess_mime_type(url)
        return SourceFile(data=response.content, mime_type=ensure_supported(mime_type))


def load_source(url: str, fetcher: RemoteFileFetcher) -> SourceFile:
    if url.startswith("data:"):
        return parse_data_url(url)
    return fetcher.fetch(url)
