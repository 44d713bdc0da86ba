"""Serialization of store snapshots for a durable slot.

A snapshot is the whole mapping of a store written as JSON. The current form
is a versioned envelope::

    {"version": 1, "records": [{"photoId": "...", ...}, ...]}

Older data was written as a bare list of records, with comment fields named
``comment``, ``dateAdded`` and ``dateUpdated``. Both forms are accepted when
reading; only the envelope is written.

Earlier still, every gallery shared one slot per kind, holding an object keyed
by gallery id. ``decode_legacy_favorites`` and ``decode_legacy_comments`` read
a single gallery out of those shared slots.
"""

import json
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from photo_gallery.domain.annotations import AnnotationRecord, FavoriteMark

SNAPSHOT_VERSION = 1


class SnapshotDecodeError(ValueError):
    """Raised when slot content cannot be read as a snapshot."""


class _SnapshotEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photo_id: str = Field(
        validation_alias=AliasChoices("photoId", "photo_id"),
        serialization_alias="photoId",
    )
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "dateAdded"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updatedAt", "dateUpdated"),
        serialization_alias="updatedAt",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class AnnotationEntry(_SnapshotEntry):
    """Serialized form of an annotation record."""

    text: str = Field(validation_alias=AliasChoices("text", "comment"))

    @classmethod
    def from_record(cls, record: AnnotationRecord) -> "AnnotationEntry":
        return cls(
            photo_id=record.photo_id,
            text=record.text,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record(self) -> AnnotationRecord:
        return AnnotationRecord(
            photo_id=self.photo_id,
            text=self.text,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class FavoriteEntry(_SnapshotEntry):
    """Serialized form of a favorite mark."""

    @classmethod
    def from_record(cls, record: FavoriteMark) -> "FavoriteEntry":
        return cls(
            photo_id=record.photo_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record(self) -> FavoriteMark:
        return FavoriteMark(
            photo_id=self.photo_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SnapshotEnvelope(BaseModel):
    """Versioned wrapper around the serialized records."""

    version: int
    records: list[dict[str, Any]]


EntryT = TypeVar("EntryT", bound=_SnapshotEntry)


def encode_snapshot(entries: list[_SnapshotEntry]) -> str:
    """Serialize entries into the current envelope format."""
    return json.dumps(
        {
            "version": SNAPSHOT_VERSION,
            "records": [
                entry.model_dump(mode="json", by_alias=True) for entry in entries
            ],
        }
    )


def decode_snapshot(raw: str, entry_type: type[EntryT]) -> list[EntryT]:
    """Parse slot content into entries of the given type."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotDecodeError(f"not valid JSON: {exc.msg}") from exc

    if isinstance(data, list):
        records = data
    else:
        try:
            envelope = SnapshotEnvelope.model_validate(data)
        except ValidationError as exc:
            raise SnapshotDecodeError(f"unexpected snapshot shape: {exc}") from exc
        if envelope.version > SNAPSHOT_VERSION:
            raise SnapshotDecodeError(
                f"unsupported snapshot version {envelope.version}"
            )
        records = envelope.records

    try:
        return TypeAdapter(list[entry_type]).validate_python(records)
    except ValidationError as exc:
        raise SnapshotDecodeError(f"invalid snapshot record: {exc}") from exc


def _legacy_gallery_items(raw: str, gallery_id: str) -> list[Any] | None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotDecodeError(f"not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise SnapshotDecodeError("shared slot is not an object keyed by gallery")
    items = data.get(gallery_id)
    if items is None:
        return None
    if not isinstance(items, list):
        raise SnapshotDecodeError(f"entry for gallery {gallery_id!r} is not a list")
    return items


def decode_legacy_favorites(
    raw: str, gallery_id: str, now: datetime
) -> list[FavoriteEntry] | None:
    """Read one gallery's favorites from the shared ``{galleryId: [photoId]}`` slot.

    Returns ``None`` when the gallery has no entry. The shared format keeps no
    timestamps, so every mark is dated ``now``.
    """
    items = _legacy_gallery_items(raw, gallery_id)
    if items is None:
        return None
    entries: dict[str, FavoriteEntry] = {}
    for item in items:
        if not isinstance(item, str):
            raise SnapshotDecodeError(f"favorite {item!r} is not a photo id")
        entries[item] = FavoriteEntry(photo_id=item, created_at=now, updated_at=now)
    return list(entries.values())


def decode_legacy_comments(
    raw: str, gallery_id: str, now: datetime
) -> list[AnnotationEntry] | None:
    """Read one gallery's comments from the shared ``{galleryId: [comment]}`` slot.

    Returns ``None`` when the gallery has no entry. A later comment for the
    same photo replaces an earlier one.
    """
    items = _legacy_gallery_items(raw, gallery_id)
    if items is None:
        return None
    entries: dict[str, AnnotationEntry] = {}
    for item in items:
        if not isinstance(item, dict):
            raise SnapshotDecodeError(f"comment {item!r} is not an object")
        try:
            entry = AnnotationEntry.model_validate(
                {"createdAt": now, "updatedAt": now, **item}
            )
        except ValidationError as exc:
            raise SnapshotDecodeError(f"invalid shared comment: {exc}") from exc
        entries[entry.photo_id] = entry
    return list(entries.values())
