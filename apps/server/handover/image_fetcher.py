"""Photo download and decode for report rendering.

Each photo URL is fetched with a bounded timeout and a payload size cap,
then decoded with Pillow to learn its pixel size.  Failures never escape
:meth:`ImageFetcher.load`: they come back as a :class:`FetchedImage` with
``error`` set so the renderer can draw a placeholder and move on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from http.client import HTTPException
from io import BytesIO
from typing import Any
from urllib.error import URLError
from urllib.parse import urlsplit
from urllib.request import Request, urlopen

from PIL import Image

from .worker_pool import WorkerPool

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0
DEFAULT_MAX_BYTES = 15 * 1024 * 1024
_ALLOWED_SCHEMES = ("http", "https")
_USER_AGENT = "handover-report/1"


class ImageFetchError(Exception):
    """A photo could not be downloaded or decoded."""


@dataclass(frozen=True, slots=True)
class FetchedImage:
    url: str
    data: bytes | None = None
    width: int = 0
    height: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None and self.error is None


def decode_image_size(data: bytes) -> tuple[int, int]:
    """Return ``(width, height)`` of encoded image bytes or raise ImageFetchError."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            width, height = img.size
    except Exception as exc:
        raise ImageFetchError(f"undecodable image: {exc}") from exc
    if width <= 0 or height <= 0:
        raise ImageFetchError("image has no pixels")
    return width, height


class ImageFetcher:
    """Fetch photo bytes over plain HTTP(S) GET.

    *opener* defaults to :func:`urllib.request.urlopen`; tests substitute a
    callable with the same ``opener(request, timeout=...)`` signature.
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_bytes: int = DEFAULT_MAX_BYTES,
        max_workers: int = 4,
        opener: Callable[..., Any] = urlopen,
    ) -> None:
        self.timeout_s = float(timeout_s)
        self.max_bytes = max(1, int(max_bytes))
        self.max_workers = max(1, int(max_workers))
        self._opener = opener

    def fetch(self, url: str) -> bytes:
        """Download *url* and return the raw payload.  Raises ImageFetchError."""
        scheme = urlsplit(url).scheme.lower()
        if scheme not in _ALLOWED_SCHEMES:
            raise ImageFetchError(f"unsupported URL scheme {scheme!r}")
        req = Request(url, headers={"User-Agent": _USER_AGENT})
        try:
            with self._opener(req, timeout=self.timeout_s) as resp:  # noqa: S310
                status = int(getattr(resp, "status", 200))
                if not 200 <= status < 300:
                    raise ImageFetchError(f"HTTP {status}")
                declared = resp.headers.get("Content-Length") if resp.headers else None
                if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
                    raise ImageFetchError(f"payload of {declared} bytes exceeds limit")
                data = resp.read(self.max_bytes + 1)
        except (URLError, HTTPException, OSError, ValueError) as exc:
            raise ImageFetchError(str(exc) or exc.__class__.__name__) from exc
        if len(data) > self.max_bytes:
            raise ImageFetchError(f"payload exceeds {self.max_bytes} bytes")
        if not data:
            raise ImageFetchError("empty payload")
        return data

    def load(self, url: str) -> FetchedImage:
        """Fetch and decode *url*; failures are logged and returned, never raised."""
        try:
            data = self.fetch(url)
            width, height = decode_image_size(data)
        except ImageFetchError as exc:
            LOGGER.warning("Photo could not be loaded from %s: %s", url, exc)
            return FetchedImage(url=url, error=str(exc))
        return FetchedImage(url=url, data=data, width=width, height=height)

    def load_many(self, urls: Sequence[str]) -> list[FetchedImage]:
        """Load every URL on a bounded pool; results follow *urls* order."""
        if not urls:
            return []
        if len(urls) == 1 or self.max_workers == 1:
            return [self.load(url) for url in urls]
        with WorkerPool(
            max_workers=min(self.max_workers, len(urls)),
            thread_name_prefix="photo-fetch",
        ) as pool:
            return pool.map_ordered(self.load, urls)
