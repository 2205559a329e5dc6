"""
MediaShare Backend — Document Identity Derivation
===================================================

What:  Builds the identifiers and timestamps stored with every document.
Why:   Ids double as constraints: a rating id is a composite of photo and
       user so that an upsert by id enforces one rating per user per photo.
How:   Pure functions of their input, the wall clock and randomness.

Formats:
    photo id    "{epoch_ms}-{6 hex}"                e.g. 1760816400123-9f1c2a
    comment id  "{photoId}-{epoch_ms}-{12 hex}"
    rating id   "{photoId}::{userKey}"
    blob name   "{photoId}.{ext}"                   ext defaults to "jpg"
"""

import time
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional

RATING_ID_SEPARATOR = "::"
DEFAULT_EXTENSION = "jpg"


def now_iso() -> str:
    """UTC timestamp, millisecond precision, "Z" suffix (sorts chronologically)."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def new_photo_id() -> str:
    """Unique photo id; also the file-name stem of the photo's blob."""
    return f"{_epoch_ms()}-{uuid.uuid4().hex[:6]}"


def comment_id(photo_id: str) -> str:
    """Unique comment id, safe without any coordination between requests."""
    return f"{photo_id}-{_epoch_ms()}-{uuid.uuid4().hex[:12]}"


def rating_id(photo_id: str, user_key: str) -> str:
    """Deterministic id: the same (photo, user) pair always maps to one document."""
    return f"{photo_id}{RATING_ID_SEPARATOR}{user_key}"


def blob_name(photo_id: str, filename: Optional[str]) -> str:
    """
    Blob name for an uploaded photo.

    The extension comes from the client's file name (lowercased); files
    without one are stored as .jpg.
    """
    ext = PurePosixPath(filename or "").suffix.lstrip(".").lower()
    return f"{photo_id}.{ext or DEFAULT_EXTENSION}"
