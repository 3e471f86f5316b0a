"""Fetching, caching and serving of site favicons."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

MAX_FAVICON_BYTES = 1024 * 1024
DEFAULT_CONTENT_TYPE = "image/x-icon"
DEFAULT_FAVICON_PATH = "/favicon.ico"
ICON_SELECTOR = (
    "link[rel='icon'], link[rel='shortcut icon'], "
    "link[rel='alternate icon'], link[id='favicon']"
)
_TIMEOUT = 30


class FaviconError(Exception):
    """The favicon could not be served; ``status_code`` is the HTTP status to reply with."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FavIcon:
    """Icon bytes with their content type."""

    data: bytes
    content_type: str


class FaviconCache:
    """A thread-safe cache that drops arbitrary entries once it grows too large."""

    def __init__(self, max_entries: int = 1000) -> None:
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: dict[str, FavIcon] = {}

    def get(self, key: str) -> FavIcon | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, content: bytes, content_type: str) -> None:
        with self._lock:
            while len(self._entries) > self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = FavIcon(data=content, content_type=content_type)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


FAVICON_CACHE = FaviconCache()


def fetch_url(url: str) -> bytes:
    """Return at most one byte more than the favicon limit of the page at ``url``."""
    limit = MAX_FAVICON_BYTES + 1
    chunks: list[bytes] = []
    total = 0
    with requests.get(url, stream=True, timeout=_TIMEOUT) as resp:
        for chunk in resp.iter_content(64 * 1024):
            chunk = chunk[: limit - total]
            chunks.append(chunk)
            total += len(chunk)
            if total >= limit:
                break
    return b"".join(chunks)


def find_favicon_url(page_content: bytes | str, base_url: str) -> tuple[str, str]:
    """Return the absolute favicon URL declared by a page and its declared type ('' if none)."""
    soup = BeautifulSoup(page_content, "html.parser")
    favicon_path = ""
    file_type = ""
    for link in soup.select(ICON_SELECTOR):
        href = link.get("href")
        if href is not None:
            favicon_path = href
            file_type = link.get("type") or ""
    if not favicon_path:
        favicon_path = DEFAULT_FAVICON_PATH
    return urljoin(base_url, favicon_path), file_type


def download_url(url: str) -> bytes:
    resp = requests.get(url, timeout=_TIMEOUT)
    return resp.content


def site_root(url: str) -> str:
    """Return the root page URL of the site ``url`` belongs to."""
    return urljoin(url, "/")


def proxy_favicon(url: str, cache: FaviconCache | None = None) -> FavIcon:
    """Find, download and cache the favicon of the site that ``url`` belongs to."""
    if not url:
        raise FaviconError("Missing 'url' parameter", 400)
    if cache is None:
        cache = FAVICON_CACHE

    root = site_root(url)
    key = root.lower()

    cached = cache.get(key)
    if cached is not None:
        return cached

    try:
        page = fetch_url(key)
    except requests.RequestException as exc:
        raise FaviconError(f"Error fetching root page: {exc}") from exc

    try:
        favicon_url, file_type = find_favicon_url(page, root)
    except ValueError as exc:
        raise FaviconError(f"Error finding favicon URL: {exc}") from exc
    if not file_type:
        file_type = DEFAULT_CONTENT_TYPE

    try:
        content = download_url(favicon_url)
    except requests.RequestException as exc:
        raise FaviconError(f"Error proxying favicon: {exc}") from exc
    if len(content) > MAX_FAVICON_BYTES:
        raise FaviconError("Error proxying favicon: favicon too large")

    cache.put(key, content, file_type)
    return FavIcon(data=content, content_type=file_type)