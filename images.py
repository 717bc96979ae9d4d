"""Turn uploaded files or image URLs into inline data URIs."""

import base64
import logging
from typing import Optional

import requests

from errors import AssetFetchError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"


def bytes_to_data_uri(data: bytes, content_type: Optional[str] = None) -> str:
    if not data:
        raise ValidationError("Please choose an IMAGE.")
    ct = (content_type or DEFAULT_CONTENT_TYPE).split(";")[0].strip() or DEFAULT_CONTENT_TYPE
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{ct};base64,{b64}"


def fetch_image(url: str, session: Optional[requests.Session] = None, timeout: float = 10.0) -> str:
    """Download an image and return it as a data URI."""
    url = (url or "").strip()
    if not url:
        raise ValidationError("Please enter an IMAGE URL.")
    if not url.lower().startswith(("http://", "https://")):
        raise AssetFetchError(f"Not a web address: {url}")

    http = session or requests
    try:
        r = http.get(url, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Image fetch failed for %s: %s", url, e)
        raise AssetFetchError(f"Could not load image from {url}") from e

    content_type = r.headers.get("Content-Type", "")
    if not content_type.lower().startswith("image/"):
        raise AssetFetchError(f"{url} is not an image ({content_type or 'unknown type'})")
    if not r.content:
        raise AssetFetchError(f"{url} returned an empty image")
    return bytes_to_data_uri(r.content, content_type)
