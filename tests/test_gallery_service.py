"""Tests for gallery annotation service."""

import json

import pytest

from photo_gallery.services.annotations import AnnotationStore, FavoritesStore
from photo_gallery.services.gallery import (
    GalleryAnnotationRegistry,
    GalleryAnnotationService,
)


def _service(storage, clock) -> GalleryAnnotationService:
    return GalleryAnnotationService(
        comments=AnnotationStore(storage, clock=clock),
        favorites=FavoritesStore(storage, clock=clock),
    )


def test_callbacks_update_summary(storage, clock) -> None:
    service = _service(storage, clock)

    service.on_toggle_favorite("p1")
    service.on_add_comment("p1", "  lovely light  ")

    summary = service.photo_summary("p1")
    assert summary.is_favorite is True
    assert summary.comment is not None
    assert summary.comment.text == "lovely light"
    assert service.favorites_count() == 1
    assert service.comments_count() == 1


def test_blank_comment_is_ignored(storage, clock) -> None:
    service = _service(storage, clock)

    service.on_add_comment("p1", "   ")

    assert service.photo_summary("p1").comment is None
    assert storage.writes == []


def test_second_comment_replaces_first(storage, clock) -> None:
    service = _service(storage, clock)

    service.on_add_comment("p1", "first")
    service.on_add_comment("p1", "second")

    assert [c.text for c in service.list_comments()] == ["second"]


def test_clear_and_remove(storage, clock) -> None:
    service = _service(storage, clock)
    service.on_toggle_favorite("p1")
    service.on_add_comment("p1", "a")
    service.on_add_comment("p2", "b")

    service.remove_comment("p1")
    assert [c.photo_id for c in service.list_comments()] == ["p2"]

    service.clear_comments()
    service.clear_favorites()
    assert service.list_comments() == []
    assert service.list_favorites() == []


def test_registry_isolates_galleries(storage, clock) -> None:
    registry = GalleryAnnotationRegistry(storage=storage, clock=clock)

    registry.for_gallery("wedding").on_toggle_favorite("p1")

    assert registry.for_gallery("wedding").photo_summary("p1").is_favorite
    assert not registry.for_gallery("portraits").photo_summary("p1").is_favorite
    assert set(storage.items) == {"photo-gallery-favorites:wedding"}


def test_registry_reuses_services(storage) -> None:
    registry = GalleryAnnotationRegistry(storage=storage)

    assert registry.for_gallery("g1") is registry.for_gallery("g1")


def test_registry_reloads_from_storage(storage, clock) -> None:
    GalleryAnnotationRegistry(storage=storage, clock=clock).for_gallery(
        "g1"
    ).on_add_comment("p1", "persisted")

    fresh = GalleryAnnotationRegistry(storage=storage)

    comment = fresh.for_gallery("g1").photo_summary("p1").comment
    assert comment is not None
    assert comment.text == "persisted"


def test_registry_rejects_empty_gallery(storage) -> None:
    registry = GalleryAnnotationRegistry(storage=storage)

    with pytest.raises(ValueError):
        registry.for_gallery(" ")


def test_registry_reads_shared_legacy_slots(storage, clock) -> None:
    storage.items["gallery-favorites"] = json.dumps({"wedding": ["p1"]})
    storage.items["gallery-comments"] = json.dumps(
        {"wedding": [{"photoId": "p1", "comment": "keep this one"}]}
    )
    registry = GalleryAnnotationRegistry(storage=storage, clock=clock)

    summary = registry.for_gallery("wedding").photo_summary("p1")

    assert summary.is_favorite
    assert summary.comment is not None
    assert summary.comment.text == "keep this one"
    assert not registry.for_gallery("portraits").photo_summary("p1").is_favorite


def test_registry_without_legacy_slots_ignores_them(storage, clock) -> None:
    storage.items["gallery-favorites"] = json.dumps({"wedding": ["p1"]})
    registry = GalleryAnnotationRegistry(
        storage=storage,
        legacy_comments_slot=None,
        legacy_favorites_slot=None,
        clock=clock,
    )

    assert registry.for_gallery("wedding").list_favorites() == []


def test_registry_drops_least_recently_used_gallery(storage, clock) -> None:
    registry = GalleryAnnotationRegistry(
        storage=storage, clock=clock, max_open_galleries=2
    )
    first = registry.for_gallery("g1")
    first.on_add_comment("p1", "survives eviction")
    registry.for_gallery("g2")
    registry.for_gallery("g1")
    registry.for_gallery("g3")

    assert registry.open_galleries() == ["g1", "g3"]

    registry.for_gallery("g4")
    reopened = registry.for_gallery("g1")

    assert reopened is not first
    comment = reopened.photo_summary("p1").comment
    assert comment is not None
    assert comment.text == "survives eviction"
