"""
streakboard.services.image_metadata — EXIF capture date extraction
===================================================================

Reads the ``DateTimeOriginal`` EXIF tag from an uploaded photo with
Pillow.  The only signal the rest of the system needs is the capture
*date*; anything unreadable (no EXIF, corrupt file, unsupported format)
yields ``None`` and the check-in proceeds as if no date was found.

This is blocking work — call it via ``run_blocking`` from async code,
and never while holding the ledger lock.
"""

from __future__ import annotations

import io
import logging
from datetime import date, datetime

from PIL import Image

logger = logging.getLogger(__name__)

__all__ = ["extract_capture_date", "parse_exif_datetime"]

_EXIF_IFD = 0x8769
_DATETIME_ORIGINAL = 0x9003
_DATETIME = 0x0132  # IFD0 fallback, written by some phones instead
_EXIF_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_datetime(raw: str | bytes | None) -> date | None:
    """Parse an EXIF ``YYYY:MM:DD HH:MM:SS`` value into a date."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("ascii", errors="ignore")
    raw = raw.strip().rstrip("\x00")
    try:
        return datetime.strptime(raw[:19], _EXIF_FORMAT).date()
    except ValueError:
        return None


def extract_capture_date(data: bytes) -> date | None:
    """Return the photo's capture date, or None when there is no usable EXIF."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            raw = exif.get_ifd(_EXIF_IFD).get(_DATETIME_ORIGINAL) or exif.get(_DATETIME)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        logger.debug("No readable image metadata (%s) — treating as no signal", exc)
        return None
    return parse_exif_datetime(raw)
