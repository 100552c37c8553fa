"""
Index document retrieval.

Fetches a repository's index.yaml with a single HTTP GET. Failures are not
retried; they surface as FetchError naming the URL and the cause.
"""

from __future__ import annotations

import http.client
import logging
import time
import urllib.error
import urllib.request
from urllib.parse import urlparse, urlunparse

from . import __version__
from .common import ListChartsError
from .config import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.yaml"
SUPPORTED_SCHEMES = ("http", "https", "file")
USER_AGENT_HEADERS = {
    "User-Agent": f"helm-list-charts/{__version__}",
    "Accept": "application/x-yaml, text/yaml, */*",
}


class FetchError(ListChartsError):
    """Raised when the index document cannot be retrieved."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


def build_index_url(source: str) -> str:
    """
    Build the index URL for a repository.

    Args:
        source: Repository URL (e.g., "https://charts.example.com/stable/")

    Returns:
        URL whose path ends in index.yaml; query and fragment are kept

    Raises:
        FetchError: If the URL cannot be parsed
    """
    source = source.strip()
    try:
        parsed = urlparse(source)
    except ValueError as e:
        raise FetchError(source, f"malformed URL ({e})") from e

    path = parsed.path.rstrip("/")
    if path.rsplit("/", 1)[-1] != INDEX_FILENAME:
        path = f"{path}/{INDEX_FILENAME}"
    return urlunparse(parsed._replace(path=path))


def validate_url(url: str) -> None:
    """
    Check that a URL can be fetched.

    Raises:
        FetchError: If the URL is malformed or the scheme is unsupported
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise FetchError(url, f"malformed URL ({e})") from e
    if parsed.scheme not in SUPPORTED_SCHEMES:
        raise FetchError(
            url,
            f"unsupported URL scheme {parsed.scheme!r} "
            f"(expected one of: {', '.join(SUPPORTED_SCHEMES)})",
        )
    if parsed.scheme != "file" and not parsed.netloc:
        raise FetchError(url, "malformed URL (missing host)")


def http_get(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    """
    Perform a single HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds

    Returns:
        Response body as bytes

    Raises:
        FetchError: If the request fails or returns a non-success status
    """
    validate_url(url)
    req = urllib.request.Request(url, headers=USER_AGENT_HEADERS)
    req_start = time.time()
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", None)
            # file:// responses carry no status
            if status is not None and not 200 <= status < 300:
                raise FetchError(url, f"HTTP {status}")
            data = resp.read()
    except urllib.error.HTTPError as e:
        raise FetchError(url, f"HTTP {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise FetchError(url, str(e.reason)) from e
    except (http.client.HTTPException, OSError, ValueError) as e:
        raise FetchError(url, f"{type(e).__name__}: {e}") from e

    req_dur = int((time.time() - req_start) * 1000)
    logger.debug(f"GET {url} ({req_dur}ms, {len(data)} bytes)")
    return data


def fetch_index(source: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    """
    Fetch the raw index.yaml of a chart repository.

    Args:
        source: Repository URL, with or without the trailing index.yaml
        timeout: Timeout in seconds

    Returns:
        Raw index document bytes

    Raises:
        FetchError: If the index cannot be retrieved
    """
    url = build_index_url(source)
    logger.debug(f"Fetching chart index from {url}")
    return http_get(url, timeout=timeout)
