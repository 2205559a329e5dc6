"""
MediaShare Backend — Input Shaping Rules
==========================================

What:  Validation and normalization of photo, comment and rating input.
Why:   The same rules apply whatever transport delivers the input (multipart
       form, JSON body, a script calling the services directly).
How:   Plain functions that either return cleaned values or raise
       ValidationError. None of them perform I/O, so every rejection happens
       before a store or blob call.
Who:   Called by PhotoService, CommentService and RatingService.

Limits:
    people      at most 30 entries
    comment     text 1000 chars, name 80 chars (longer input is truncated)
    user key    120 chars (truncated)
    rating      finite number, 1 <= value <= 5
"""

import math
from typing import Any, Dict, List, Tuple, Union

from mediashare.exceptions import ValidationError

MAX_PEOPLE = 30
MAX_COMMENT_TEXT = 1000
MAX_COMMENT_NAME = 80
MAX_USER_KEY = 120
MIN_RATING = 1
MAX_RATING = 5

DEFAULT_COMMENT_NAME = "Anonymous"
DEFAULT_USER_KEY = "anon"


def clean_text(value: Any) -> str:
    """str() and strip; None becomes the empty string."""
    if value is None:
        return ""
    return str(value).strip()


def people_list(value: Any) -> List[str]:
    """
    Parse the people field into a list of names.

    Accepts a comma-separated string ("Alice, Bob") or an already structured
    list. Entries are trimmed, empty entries dropped, order and duplicates
    kept, case untouched; at most MAX_PEOPLE entries survive.

    Example:
        people_list("Alice, Bob, , Alice") → ["Alice", "Bob", "Alice"]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        entries = [clean_text(item) for item in value]
    else:
        entries = [part.strip() for part in str(value).split(",")]
    return [entry for entry in entries if entry][:MAX_PEOPLE]


def shape_photo_fields(
    title: Any,
    caption: Any = None,
    location: Any = None,
    people: Any = None,
) -> Dict[str, Any]:
    """
    Validate photo metadata submitted with an upload.

    Returns:
        dict with title, caption, location (trimmed strings) and people (list)

    Raises:
        ValidationError: title is missing or blank
    """
    clean_title = clean_text(title)
    if not clean_title:
        raise ValidationError(message="title is required", field="title")
    return {
        "title": clean_title,
        "caption": clean_text(caption),
        "location": clean_text(location),
        "people": people_list(people),
    }


def shape_comment(name: Any, text: Any) -> Tuple[str, str]:
    """
    Validate a comment submission.

    Returns:
        (name, text): name defaults to "Anonymous"; both are trimmed and
        truncated to their limits

    Raises:
        ValidationError: text is missing or blank
    """
    clean_body = clean_text(text)[:MAX_COMMENT_TEXT]
    if not clean_body:
        raise ValidationError(message="text is required", field="text")
    clean_name = clean_text(name)[:MAX_COMMENT_NAME] or DEFAULT_COMMENT_NAME
    return clean_name, clean_body


def parse_rating_value(value: Any) -> Union[int, float]:
    """
    Parse a submitted rating value.

    Numbers and numeric strings are accepted when finite and within
    MIN_RATING..MAX_RATING inclusive. Booleans, blanks, NaN and infinities are
    rejected. Integral values come back as int (3.0 → 3).

    Raises:
        ValidationError: "Rating must be 1..5"
    """
    invalid = ValidationError(
        message=f"Rating must be {MIN_RATING}..{MAX_RATING}",
        field="value",
        context={"value": repr(value)[:50]},
    )

    if isinstance(value, bool) or value is None:
        raise invalid
    if not isinstance(value, (int, float, str)):
        raise invalid
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # ints beyond float range overflow instead of becoming inf
        raise invalid

    if not math.isfinite(number) or number < MIN_RATING or number > MAX_RATING:
        raise invalid
    return int(number) if number.is_integer() else number


def clean_user_key(value: Any) -> str:
    """User key of a rating: defaults to "anon", truncated to MAX_USER_KEY."""
    if value is None or value == "":
        return DEFAULT_USER_KEY
    return str(value)[:MAX_USER_KEY]
