"""Domain models for photo annotations."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AnnotationRecord:
    """A comment attached to a single photo."""

    photo_id: str
    text: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FavoriteMark:
    """Marks a photo as a favorite."""

    photo_id: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PhotoAnnotations:
    """Everything annotated on one photo."""

    photo_id: str
    is_favorite: bool
    comment: AnnotationRecord | None
