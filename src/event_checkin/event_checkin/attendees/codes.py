"""Scannable code payloads.

The QR code carries ``{"id": "<attendee_id>"}``. Older printed badges may
carry a link to the participant page instead, so decoding also accepts URLs
and bare ids.
"""
from __future__ import annotations

import io
import json
import re
from typing import Optional
from urllib.parse import urlencode, urlparse

import qrcode

from ..core.constants import DEFAULT_QR_IMAGE_BASE_URL, DEFAULT_QR_IMAGE_SIZE

_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_PATH_RE = re.compile(r"/(?:participant|attendees)/([A-Za-z0-9_-]{1,64})/?$")


def build_payload(attendee_id: str) -> str:
    return json.dumps({"id": attendee_id}, separators=(",", ":"))


def decode_payload(text: str) -> Optional[str]:
    """Return the attendee id carried by a scanned code, or None."""
    raw = (text or "").strip()
    if not raw:
        return None

    if raw.startswith("{"):
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        attendee_id = data.get("id") if isinstance(data, dict) else None
        if isinstance(attendee_id, str) and _ID_RE.match(attendee_id):
            return attendee_id
        return None

    if "://" in raw:
        match = _PATH_RE.search(urlparse(raw).path)
        return match.group(1) if match else None

    return raw if _ID_RE.match(raw) else None


def qr_image_url(payload: str, *, base_url: str = DEFAULT_QR_IMAGE_BASE_URL, size: str = DEFAULT_QR_IMAGE_SIZE) -> str:
    """Link to an external QR generator that renders ``payload``."""
    return f"{base_url}?{urlencode({'size': size, 'data': payload})}"


def render_png(payload: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
