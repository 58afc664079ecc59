"""
Signature image loading for the ReportLab renderer.

Signature values come from user records and settings in three shapes: data
URIs, bare base64 payloads and http(s) URLs. Local file paths are accepted
for the principal signature. Every failure degrades to "no image".
"""

import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

import httpx
from reportlab.lib.utils import ImageReader


logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 10.0


def _decode_base64(value: str) -> Optional[bytes]:
    payload = value.split(',', 1)[1] if ',' in value else value
    try:
        data = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Failed to decode base64 signature image: {e}")
        return None
    return data or None


def _fetch_url(url: str, timeout: float) -> Optional[bytes]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Failed to fetch signature image: {e}")
        return None
    return response.content or None


def local_image_path(value: str) -> Optional[Path]:
    """The path ``value`` names if it is an existing image file, else None."""
    if len(value) >= 4096:
        return None
    path = Path(value)
    if path.suffix and path.is_file():
        return path
    return None


def load_signature_image(value: Optional[str],
                         timeout: float = DEFAULT_FETCH_TIMEOUT) -> Optional[bytes]:
    """
    Load raw image bytes for a signature value.

    Args:
        value: Data URI, bare base64 payload, http(s) URL or local path
        timeout: Timeout in seconds for URL fetches

    Returns:
        Image bytes, or None if the value is empty or cannot be loaded
    """
    if not value:
        return None

    value = value.strip()
    if value.startswith(('http://', 'https://')):
        return _fetch_url(value, timeout)

    if value.startswith('data:'):
        return _decode_base64(value)

    path = local_image_path(value)
    if path is not None:
        return path.read_bytes()

    return _decode_base64(value)


def image_reader(data: Optional[bytes]) -> Optional[ImageReader]:
    """
    Wrap image bytes in a ReportLab ImageReader.

    Returns None when the bytes are not a decodable image.
    """
    if not data:
        return None
    try:
        reader = ImageReader(BytesIO(data))
        reader.getSize()
    except Exception as e:
        logger.warning(f"Signature image could not be decoded: {e}")
        return None
    return reader
