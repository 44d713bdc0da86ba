"""File-backed local key-value storage."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from photo_gallery.domain.storage import StorageResult
from photo_gallery.services.annotations import KeyValueStorage

_SUFFIX = ".json"
_EMPTY_KEY = StorageResult.failure("storage key must not be empty")


@dataclass
class FileKeyValueStorage(KeyValueStorage):
    """Stores each key as one file under a root directory.

    Writes land in a temporary file first and are moved into place, so a
    crash mid-write leaves the previous value intact. When ``quota_bytes`` is
    set, a write that would push the total size of stored values past it is
    rejected.
    """

    root: Path
    quota_bytes: int | None = None

    def get_item(self, key: str) -> StorageResult:
        """Read the value stored under a key."""
        if not key:
            return _EMPTY_KEY
        path = self._path_for(key)
        try:
            return StorageResult.success(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return StorageResult.success(None)
        except (OSError, UnicodeDecodeError) as exc:
            return StorageResult.failure(f"read failed for {key!r}: {exc}")

    def set_item(self, key: str, value: str) -> StorageResult:
        """Atomically replace the value stored under a key."""
        if not key:
            return _EMPTY_KEY
        path = self._path_for(key)
        payload = value.encode("utf-8")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if self.quota_bytes is not None:
                used = self._used_bytes(exclude=path)
                if used + len(payload) > self.quota_bytes:
                    return StorageResult.failure(
                        f"quota exceeded for {key!r}: "
                        f"{used + len(payload)} > {self.quota_bytes} bytes"
                    )
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            return StorageResult.failure(f"write failed for {key!r}: {exc}")
        return StorageResult.success()

    def remove_item(self, key: str) -> StorageResult:
        """Delete the value stored under a key."""
        if not key:
            return _EMPTY_KEY
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            return StorageResult.failure(f"remove failed for {key!r}: {exc}")
        return StorageResult.success()

    def _path_for(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}{_SUFFIX}"

    def _used_bytes(self, exclude: Path) -> int:
        return sum(
            path.stat().st_size
            for path in self.root.glob(f"*{_SUFFIX}")
            if path != exclude
        )
