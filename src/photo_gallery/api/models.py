"""Pydantic models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from photo_gallery.domain.annotations import (
    AnnotationRecord,
    FavoriteMark,
    PhotoAnnotations,
)


class ApiModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CommentResponse(ApiModel):
    """A stored photo comment."""

    photo_id: str
    text: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: AnnotationRecord) -> "CommentResponse":
        return cls(
            photo_id=record.photo_id,
            text=record.text,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class FavoriteResponse(ApiModel):
    """A stored favorite mark."""

    photo_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: FavoriteMark) -> "FavoriteResponse":
        return cls(
            photo_id=record.photo_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class PhotoSummaryResponse(ApiModel):
    """Favorite state and comment of a photo."""

    photo_id: str
    is_favorite: bool
    comment: CommentResponse | None = None

    @classmethod
    def from_summary(cls, summary: PhotoAnnotations) -> "PhotoSummaryResponse":
        return cls(
            photo_id=summary.photo_id,
            is_favorite=summary.is_favorite,
            comment=(
                CommentResponse.from_record(summary.comment)
                if summary.comment
                else None
            ),
        )


class FavoriteToggleResponse(ApiModel):
    """Favorite state after a toggle."""

    photo_id: str
    is_favorite: bool


class CommentListResponse(ApiModel):
    """Comments of a gallery."""

    comments: list[CommentResponse]
    count: int


class FavoriteListResponse(ApiModel):
    """Favorites of a gallery."""

    favorites: list[FavoriteResponse]
    count: int


class CommentRequest(ApiModel):
    """Comment text submitted for a photo."""

    text: str


class SendEmailRequest(ApiModel):
    """Email send request; required fields are checked by the mail service."""

    to: str | None = None
    from_address: str | None = Field(default=None, alias="from")
    subject: str | None = None
    html: str | None = None
    text: str | None = None
    reply_to: str | None = None
