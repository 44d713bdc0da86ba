"""Domain models for the local key-value storage boundary."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageResult:
    """Outcome of a key-value storage call.

    A read of a missing key is a success with ``value`` set to ``None``.
    Failures carry a human readable ``reason`` instead of raising.
    """

    ok: bool
    value: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, value: str | None = None) -> "StorageResult":
        """Build a successful result."""
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "StorageResult":
        """Build a failed result."""
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class LegacySource:
    """One gallery's entry inside a shared slot keyed by gallery id."""

    slot: str
    gallery_id: str
