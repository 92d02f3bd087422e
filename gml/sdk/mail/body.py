"""Message body extraction from Gmail MIME part trees."""

import base64
import binascii
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def extract_body(payload: Optional[dict]) -> str:
    """
    Extract the readable body from a message payload.

    Searches the part tree depth-first for the first text/plain part, then
    for the first text/html part, then falls back to the payload's own
    inline body. Parts whose data cannot be decoded are skipped.

    Args:
        payload: The message payload from the Gmail API (format='full')

    Returns:
        The decoded body, or an empty string if nothing usable was found
    """
    if not payload:
        return ""

    for mime_type in ('text/plain', 'text/html'):
        body = _find_body_part(payload, mime_type)
        if body:
            return body

    return _decode_part_data(payload) or ""


def _find_body_part(part: dict, mime_type: str) -> Optional[str]:
    """Pre-order search for the first decodable part of the given MIME type."""
    if part.get('mimeType') == mime_type:
        body = _decode_part_data(part)
        if body:
            return body

    for subpart in part.get('parts') or []:
        body = _find_body_part(subpart, mime_type)
        if body:
            return body

    return None


def _decode_part_data(part: dict) -> Optional[str]:
    """Decode a part's base64url body data, or return None if it has none or is invalid."""
    data = (part.get('body') or {}).get('data')
    if not data:
        return None
    try:
        raw = base64.b64decode(data + '=' * (-len(data) % 4), altchars=b'-_', validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug(f"Skipping undecodable {part.get('mimeType', 'unknown')} part: {e}")
        return None
    return raw.decode('utf-8', errors='ignore')
