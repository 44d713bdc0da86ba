"""Annotation stores backed by a durable local key-value slot.

Each store keeps its whole mapping in memory and writes a full snapshot to
its slot after every mutation. Storage problems never escape a store: a slot
that cannot be read leaves the store empty, and a write that fails leaves the
in-memory mapping authoritative for the rest of the session.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Generic, Protocol, TypeVar

from photo_gallery.domain.annotations import AnnotationRecord, FavoriteMark
from photo_gallery.domain.storage import LegacySource, StorageResult
from photo_gallery.services.snapshots import (
    AnnotationEntry,
    FavoriteEntry,
    SnapshotDecodeError,
    decode_legacy_comments,
    decode_legacy_favorites,
    decode_snapshot,
    encode_snapshot,
)

_logger = logging.getLogger(__name__)

DEFAULT_COMMENTS_SLOT = "photo-gallery-comments"
DEFAULT_FAVORITES_SLOT = "photo-gallery-favorites"
LEGACY_COMMENTS_SLOT = "gallery-comments"
LEGACY_FAVORITES_SLOT = "gallery-favorites"


class KeyValueStorage(Protocol):
    """Interface for a local key-value storage facility."""

    def get_item(self, key: str) -> StorageResult:
        """Return the stored value, or a success with no value when absent."""

    def set_item(self, key: str, value: str) -> StorageResult:
        """Store a value under a key, replacing any previous value."""

    def remove_item(self, key: str) -> StorageResult:
        """Remove a key; removing an absent key succeeds."""


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


RecordT = TypeVar("RecordT", AnnotationRecord, FavoriteMark)


@dataclass
class _SlotStore(ABC, Generic[RecordT]):
    storage: KeyValueStorage
    slot: str
    clock: Callable[[], datetime] = utc_now
    legacy: LegacySource | None = None
    load_result: StorageResult = field(init=False, repr=False)
    last_persist_result: StorageResult | None = field(
        default=None, init=False, repr=False
    )
    _records: dict[str, RecordT] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.load_result = self._load()

    def __len__(self) -> int:
        return len(self._records)

    def get(self, photo_id: str) -> RecordT | None:
        """Return the record for a photo, if present."""
        return self._records.get(photo_id)

    def has(self, photo_id: str) -> bool:
        """Return True when the photo has a record."""
        return photo_id in self._records

    def list_all(self) -> list[RecordT]:
        """Return every record, most recently updated first."""
        by_id = sorted(self._records.values(), key=lambda record: record.photo_id)
        return sorted(by_id, key=lambda record: record.updated_at, reverse=True)

    def remove(self, photo_id: str) -> None:
        """Delete the record for a photo if present."""
        self._records.pop(photo_id, None)
        self._persist()

    def clear(self) -> None:
        """Remove every record."""
        self._records.clear()
        self._persist()

    @abstractmethod
    def _decode(self, raw: str) -> list[RecordT]:
        """Parse the content of this store's own slot."""

    @abstractmethod
    def _decode_legacy(self, raw: str, gallery_id: str) -> list[RecordT] | None:
        """Parse one gallery's entry out of a shared legacy slot."""

    @abstractmethod
    def _encode(self) -> str:
        """Serialize the whole mapping."""

    def _load(self) -> StorageResult:
        result = self.storage.get_item(self.slot)
        if not result.ok:
            _logger.error(
                "Failed to read slot %s, starting empty: %s", self.slot, result.reason
            )
            return result
        if result.value is None:
            if self.legacy is not None:
                self._migrate_legacy(self.legacy)
            return result
        try:
            records = self._decode(result.value)
        except SnapshotDecodeError as exc:
            _logger.warning("Corrupted slot %s, starting empty: %s", self.slot, exc)
            return StorageResult.failure(f"corrupted snapshot: {exc}")
        self._records = {record.photo_id: record for record in records}
        _logger.debug("Loaded %s records from slot %s", len(self._records), self.slot)
        return result

    def _migrate_legacy(self, legacy: LegacySource) -> None:
        # The shared slot is only read; other galleries still live in it.
        result = self.storage.get_item(legacy.slot)
        if not result.ok:
            _logger.warning(
                "Failed to read shared slot %s: %s", legacy.slot, result.reason
            )
            return
        if result.value is None:
            return
        try:
            records = self._decode_legacy(result.value, legacy.gallery_id)
        except SnapshotDecodeError as exc:
            _logger.warning("Ignoring corrupted shared slot %s: %s", legacy.slot, exc)
            return
        if records is None:
            return
        self._records = {record.photo_id: record for record in records}
        _logger.info(
            "Migrated %s records for gallery %s from %s to %s",
            len(self._records),
            legacy.gallery_id,
            legacy.slot,
            self.slot,
        )
        self._persist()

    def _persist(self) -> StorageResult:
        try:
            raw = self._encode()
        except (TypeError, ValueError) as exc:
            result = StorageResult.failure(f"serialization failed: {exc}")
        else:
            result = self.storage.set_item(self.slot, raw)
        if not result.ok:
            _logger.error("Failed to persist slot %s: %s", self.slot, result.reason)
        self.last_persist_result = result
        return result


@dataclass
class AnnotationStore(_SlotStore[AnnotationRecord]):
    """Per-photo comments, one record per photo."""

    slot: str = DEFAULT_COMMENTS_SLOT

    def add(self, photo_id: str, text: str) -> None:
        """Create a comment, or replace the existing one for the photo."""
        self._upsert(photo_id, text)
        self._persist()

    def update(self, photo_id: str, text: str) -> None:
        """Replace a comment's text, creating it when absent."""
        self._upsert(photo_id, text)
        self._persist()

    def _upsert(self, photo_id: str, text: str) -> None:
        now = self.clock()
        existing = self._records.get(photo_id)
        if existing is None:
            self._records[photo_id] = AnnotationRecord(
                photo_id=photo_id, text=text, created_at=now, updated_at=now
            )
        else:
            self._records[photo_id] = replace(existing, text=text, updated_at=now)

    def _decode(self, raw: str) -> list[AnnotationRecord]:
        return [entry.to_record() for entry in decode_snapshot(raw, AnnotationEntry)]

    def _decode_legacy(
        self, raw: str, gallery_id: str
    ) -> list[AnnotationRecord] | None:
        entries = decode_legacy_comments(raw, gallery_id, self.clock())
        if entries is None:
            return None
        return [entry.to_record() for entry in entries]

    def _encode(self) -> str:
        return encode_snapshot(
            [AnnotationEntry.from_record(record) for record in self._records.values()]
        )


@dataclass
class FavoritesStore(_SlotStore[FavoriteMark]):
    """Favorite marks, present or absent per photo."""

    slot: str = DEFAULT_FAVORITES_SLOT

    def add(self, photo_id: str) -> None:
        """Mark a photo as favorite, refreshing an existing mark."""
        self._mark(photo_id)
        self._persist()

    def update(self, photo_id: str) -> None:
        """Same as ``add``."""
        self.add(photo_id)

    def set(self, photo_id: str, marked: bool) -> None:
        """Mark or unmark a photo."""
        if marked:
            self.add(photo_id)
        else:
            self.remove(photo_id)

    def toggle(self, photo_id: str) -> bool:
        """Flip the mark for a photo and return the new state."""
        marked = not self.has(photo_id)
        self.set(photo_id, marked)
        return marked

    def _mark(self, photo_id: str) -> None:
        now = self.clock()
        existing = self._records.get(photo_id)
        if existing is None:
            self._records[photo_id] = FavoriteMark(
                photo_id=photo_id, created_at=now, updated_at=now
            )
        else:
            self._records[photo_id] = replace(existing, updated_at=now)

    def _decode(self, raw: str) -> list[FavoriteMark]:
        return [entry.to_record() for entry in decode_snapshot(raw, FavoriteEntry)]

    def _decode_legacy(self, raw: str, gallery_id: str) -> list[FavoriteMark] | None:
        entries = decode_legacy_favorites(raw, gallery_id, self.clock())
        if entries is None:
            return None
        return [entry.to_record() for entry in entries]

    def _encode(self) -> str:
        return encode_snapshot(
            [FavoriteEntry.from_record(record) for record in self._records.values()]
        )
