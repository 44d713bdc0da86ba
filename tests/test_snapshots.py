"""Tests for snapshot serialization."""

import json
from datetime import UTC, datetime

import pytest

from photo_gallery.services.snapshots import (
    AnnotationEntry,
    SnapshotDecodeError,
    decode_legacy_comments,
    decode_legacy_favorites,
    decode_snapshot,
    encode_snapshot,
)


def test_encode_writes_versioned_envelope() -> None:
    entry = AnnotationEntry(
        photo_id="p1",
        text="hello",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        updated_at=datetime(2024, 1, 2, tzinfo=UTC),
    )

    data = json.loads(encode_snapshot([entry]))

    assert data["version"] == 1
    assert data["records"][0]["photoId"] == "p1"
    assert data["records"][0]["text"] == "hello"
    assert set(data["records"][0]) == {"photoId", "text", "createdAt", "updatedAt"}


def test_decode_assumes_utc_for_naive_timestamps() -> None:
    raw = json.dumps(
        [
            {
                "photoId": "p1",
                "text": "naive",
                "createdAt": "2024-01-01T10:00:00",
                "updatedAt": "2024-01-01T10:00:00",
            }
        ]
    )

    (entry,) = decode_snapshot(raw, AnnotationEntry)

    assert entry.created_at.utcoffset() is not None
    assert entry.created_at.utcoffset().total_seconds() == 0


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "null",
        "42",
        '{"records": []}',
        '{"version": 2, "records": []}',
        '[{"photoId": "p1"}]',
        '[{"photoId": "p1", "createdAt": "yesterday", "updatedAt": "today"}]',
    ],
)
def test_decode_rejects_bad_content(raw: str) -> None:
    with pytest.raises(SnapshotDecodeError):
        decode_snapshot(raw, AnnotationEntry)


def test_decode_error_is_value_error() -> None:
    assert issubclass(SnapshotDecodeError, ValueError)


NOW = datetime(2024, 6, 1, 9, 30, tzinfo=UTC)


def test_legacy_favorites_are_read_per_gallery() -> None:
    raw = json.dumps({"wedding": ["p2", "p1"], "portraits": ["p9"]})

    entries = decode_legacy_favorites(raw, "wedding", NOW)

    assert entries is not None
    assert [entry.photo_id for entry in entries] == ["p2", "p1"]
    assert {entry.updated_at for entry in entries} == {NOW}
    assert decode_legacy_favorites(raw, "family", NOW) is None


def test_legacy_comments_ignore_extra_fields() -> None:
    raw = json.dumps(
        {
            "wedding": [
                {
                    "id": "c1",
                    "galleryId": "wedding",
                    "deviceId": "device_1",
                    "photoId": "p1",
                    "comment": "lovely",
                    "createdAt": "2024-02-01T08:00:00Z",
                    "updatedAt": "2024-02-02T08:00:00Z",
                }
            ]
        }
    )

    (entry,) = decode_legacy_comments(raw, "wedding", NOW) or []

    assert entry.text == "lovely"
    assert entry.created_at == datetime(2024, 2, 1, 8, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "raw",
    [
        "{oops",
        '["wedding"]',
        '{"wedding": "p1"}',
        '{"wedding": [{"photoId": "p1"}]}',
    ],
)
def test_legacy_comments_reject_bad_content(raw: str) -> None:
    with pytest.raises(SnapshotDecodeError):
        decode_legacy_comments(raw, "wedding", NOW)


def test_legacy_favorites_reject_non_string_ids() -> None:
    with pytest.raises(SnapshotDecodeError):
        decode_legacy_favorites('{"wedding": [{"photoId": "p1"}]}', "wedding", NOW)
