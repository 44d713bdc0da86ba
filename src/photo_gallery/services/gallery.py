"""Gallery-level annotation actions."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from photo_gallery.domain.annotations import (
    AnnotationRecord,
    FavoriteMark,
    PhotoAnnotations,
)
from photo_gallery.domain.storage import LegacySource
from photo_gallery.services.annotations import (
    DEFAULT_COMMENTS_SLOT,
    DEFAULT_FAVORITES_SLOT,
    LEGACY_COMMENTS_SLOT,
    LEGACY_FAVORITES_SLOT,
    AnnotationStore,
    FavoritesStore,
    KeyValueStorage,
    utc_now,
)

_logger = logging.getLogger(__name__)


@dataclass
class GalleryAnnotationService:
    """Handles favorite and comment actions for one gallery."""

    comments: AnnotationStore
    favorites: FavoritesStore

    def on_toggle_favorite(self, photo_id: str) -> None:
        """Flip the favorite mark of a photo."""
        self.favorites.toggle(photo_id)

    def on_add_comment(self, photo_id: str, text: str) -> None:
        """Store a comment for a photo; blank text is ignored."""
        cleaned = text.strip()
        if not cleaned:
            _logger.debug("Ignoring blank comment for photo %s", photo_id)
            return
        self.comments.update(photo_id, cleaned)

    def remove_comment(self, photo_id: str) -> None:
        """Delete the comment of a photo."""
        self.comments.remove(photo_id)

    def clear_comments(self) -> None:
        """Delete every comment in the gallery."""
        self.comments.clear()

    def clear_favorites(self) -> None:
        """Unmark every favorite in the gallery."""
        self.favorites.clear()

    def photo_summary(self, photo_id: str) -> PhotoAnnotations:
        """Return the favorite state and comment of a photo."""
        return PhotoAnnotations(
            photo_id=photo_id,
            is_favorite=self.favorites.has(photo_id),
            comment=self.comments.get(photo_id),
        )

    def list_comments(self) -> list[AnnotationRecord]:
        """Return comments, most recently updated first."""
        return self.comments.list_all()

    def list_favorites(self) -> list[FavoriteMark]:
        """Return favorites, most recently marked first."""
        return self.favorites.list_all()

    def comments_count(self) -> int:
        return len(self.comments)

    def favorites_count(self) -> int:
        return len(self.favorites)


@dataclass
class GalleryAnnotationRegistry:
    """Builds annotation services with one pair of slots per gallery.

    At most ``max_open_galleries`` services are kept open; the least recently
    used one is dropped first and reloads from storage when asked for again.
    A gallery whose own slot is still empty is seeded from its entry in the
    shared legacy slots, when those are set.
    """

    storage: KeyValueStorage
    comments_slot: str = DEFAULT_COMMENTS_SLOT
    favorites_slot: str = DEFAULT_FAVORITES_SLOT
    legacy_comments_slot: str | None = LEGACY_COMMENTS_SLOT
    legacy_favorites_slot: str | None = LEGACY_FAVORITES_SLOT
    clock: Callable[[], datetime] = utc_now
    max_open_galleries: int = 128
    _services: OrderedDict[str, GalleryAnnotationService] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def for_gallery(self, gallery_id: str) -> GalleryAnnotationService:
        """Return the service for a gallery, opening its stores on first use."""
        if not gallery_id or not gallery_id.strip():
            raise ValueError("gallery_id cannot be empty.")
        service = self._services.get(gallery_id)
        if service is not None:
            self._services.move_to_end(gallery_id)
            return service
        service = GalleryAnnotationService(
            comments=AnnotationStore(
                self.storage,
                slot=f"{self.comments_slot}:{gallery_id}",
                clock=self.clock,
                legacy=self._legacy(self.legacy_comments_slot, gallery_id),
            ),
            favorites=FavoritesStore(
                self.storage,
                slot=f"{self.favorites_slot}:{gallery_id}",
                clock=self.clock,
                legacy=self._legacy(self.legacy_favorites_slot, gallery_id),
            ),
        )
        self._services[gallery_id] = service
        while len(self._services) > max(self.max_open_galleries, 1):
            evicted, _ = self._services.popitem(last=False)
            _logger.debug("Closed annotation stores for gallery %s", evicted)
        return service

    def open_galleries(self) -> list[str]:
        """Return the ids of galleries with open stores, oldest first."""
        return list(self._services)

    @staticmethod
    def _legacy(slot: str | None, gallery_id: str) -> LegacySource | None:
        if not slot:
            return None
        return LegacySource(slot=slot, gallery_id=gallery_id)
