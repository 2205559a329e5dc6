"""
MediaShare Backend — Pydantic Document & API Schemas
======================================================

What:  Pydantic models for the stored documents and the API contract.
Why:   One definition serves the document shape written to the metadata
       store, response serialization, and OpenAPI docs.
How:   Python attributes are snake_case; the wire and document names are
       camelCase (photoId, createdAt, userKey) via an alias generator.
       `model_dump(by_alias=True)` produces the stored document; FastAPI
       serializes responses by alias.

Documents written by other clients may carry extra keys (Cosmos adds _rid,
_etag, _ts); they are ignored when a document is validated into a model.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every model exchanged with clients or the metadata store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


# ══════════════════════════════════════════════════════════════════════════
# Documents — what the metadata store holds
# ══════════════════════════════════════════════════════════════════════════


class Photo(CamelModel):
    """
    What:  Metadata of an uploaded photo.
    Who:   Written once by POST /api/photos; read by list/search/detail.
    Never updated after creation. `id` and `photo_id` hold the same value.
    """
    id: str = Field(description="Unique photo identifier")
    photo_id: str = Field(description="Same as id; kept for partitioned queries")
    title: str = Field(description="Photo title (required, trimmed)")
    caption: str = Field(default="", description="Optional caption")
    location: str = Field(default="", description="Optional location")
    people: List[str] = Field(default_factory=list, description="People shown, in entered order")
    url: str = Field(description="Public URL of the stored image")
    blob_name: str = Field(description="Name of the image in blob storage")
    content_type: str = Field(default="image/jpeg", description="MIME type of the image")
    created_at: str = Field(description="Creation time (UTC ISO 8601)")


class Comment(CamelModel):
    """
    What:  A comment on a photo. Append-only: never edited or deleted.
    """
    id: str = Field(description="Unique comment identifier")
    photo_id: str = Field(description="Photo the comment belongs to")
    name: str = Field(default="Anonymous", description="Author display name")
    text: str = Field(description="Comment text")
    created_at: str = Field(description="Creation time (UTC ISO 8601)")


class Rating(CamelModel):
    """
    What:  One user's 1-5 rating of a photo.
    How:   id is "{photoId}::{userKey}", so a second submission by the same
           user key replaces the first instead of adding a record.
    """
    id: str = Field(description="Composite identifier photoId::userKey")
    photo_id: str = Field(description="Rated photo")
    user_key: str = Field(default="anon", description="Client-chosen user key")
    value: Union[int, float] = Field(description="Rating value, 1 to 5 inclusive")
    updated_at: str = Field(description="Time of the latest submission (UTC ISO 8601)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RatingSummary(CamelModel):
    """
    What:  Derived aggregate of a photo's ratings (never persisted).
    average is rounded to 2 decimals and is 0 when count is 0.
    """
    photo_id: str
    count: int = Field(ge=0)
    average: float


class RatingSaveResponse(BaseModel):
    """Returned by POST /api/photos/{id}/rating with HTTP 201."""
    message: str = Field(default="Rating saved")
    rating: Rating


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.
    Example:
        {"error": "Rating must be 1..5", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str
    metadata_store: str = Field(description="available or unavailable")
    blob_storage: str = Field(description="available or unavailable")
    uptime_seconds: float


# ══════════════════════════════════════════════════════════════════════════
# Request Models — JSON bodies
# ══════════════════════════════════════════════════════════════════════════


def _scalar_to_str(v: Any) -> Any:
    # Numbers and booleans sent by loose clients are accepted as their text.
    if v is None or isinstance(v, (str, dict, list)):
        return v
    return str(v)


class CommentCreate(CamelModel):
    """Body of POST /api/photos/{id}/comments. Rules live in services.shaping."""
    name: Optional[str] = None
    text: Optional[str] = None

    @field_validator("name", "text", mode="before")
    @classmethod
    def coerce_scalars(cls, v: Any) -> Any:
        return _scalar_to_str(v)


class RatingCreate(CamelModel):
    """Body of POST /api/photos/{id}/rating. `value` is checked by parse_rating_value."""
    value: Any = None
    user_key: Optional[str] = None

    @field_validator("user_key", mode="before")
    @classmethod
    def coerce_scalars(cls, v: Any) -> Any:
        return _scalar_to_str(v)
