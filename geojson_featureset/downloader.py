"""Fetching remote GeoJSON documents.

The featureset itself never performs I/O; :class:`GeoJSONDatasource`
calls :func:`fetch_bytes` when it is pointed at a URL.  The payload is
kept in memory, which is what the parser wants since it consumes the
whole document up front.  A gzip compressed body (``.geojson.gz`` files
served as-is) is inflated before it is returned.

Examples
--------
>>> from geojson_featureset.downloader import fetch_bytes
>>> payload = fetch_bytes("https://example.com/points.geojson")
>>> payload[:1]
b'{'

Note
----
No content validation happens here beyond gzip detection; malformed
documents are reported by the parser.
"""

from __future__ import annotations

import gzip
import logging

import requests
from requests.adapters import HTTPAdapter, Retry

from . import __version__

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
ACCEPT = "application/geo+json, application/json;q=0.9, */*;q=0.1"


def _create_session(retries: int = 3) -> requests.Session:
    """Session retrying idempotent GETs on throttling and gateway errors."""
    adapter = HTTPAdapter(
        max_retries=Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=[429, 502, 503, 504],
            allowed_methods=("GET",),
            raise_on_status=False,
        )
    )
    session = requests.Session()
    for scheme in ("https://", "http://"):
        session.mount(scheme, adapter)
    session.headers["User-Agent"] = f"geojson_featureset/{__version__}"
    session.headers["Accept"] = ACCEPT
    return session


def _check_url(url: str) -> None:
    if not url or not isinstance(url, str):
        raise ValueError("A valid URL must be provided")
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Unsupported URL scheme for download: {url}")


def fetch_bytes(url: str, timeout: float = 15.0) -> bytes:
    """Return the body of ``url``, gunzipped if it is gzip compressed.

    Raises
    ------
    ValueError
        If ``url`` is falsy or not an HTTP(S) URL.
    RuntimeError
        If the resource cannot be retrieved.
    """
    _check_url(url)
    session = _create_session()
    try:
        logger.debug("Fetching %s", url)
        response = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise RuntimeError(f"Failed to download {url}: {exc}") from exc
    if response.status_code >= 400:
        raise RuntimeError(f"Failed to download {url}: HTTP {response.status_code}")

    payload = response.content
    if payload[:2] == GZIP_MAGIC:
        try:
            payload = gzip.decompress(payload)
        except OSError as exc:
            raise RuntimeError(f"Failed to decompress {url}: {exc}") from exc
    logger.debug("Fetched %d bytes from %s", len(payload), url)
    return payload


__all__ = ["fetch_bytes"]
