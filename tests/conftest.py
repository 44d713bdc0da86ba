"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from photo_gallery.config import Settings
from photo_gallery.containers import AppContainer
from photo_gallery.domain.mail import OutgoingEmail
from photo_gallery.domain.storage import StorageResult
from photo_gallery.services.annotations import KeyValueStorage
from photo_gallery.services.gallery import GalleryAnnotationRegistry
from photo_gallery.services.mail import (
    MailConfigurationError,
    MailService,
    MailTransport,
)


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    """In-memory key-value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get_item(self, key: str) -> StorageResult:
        return StorageResult.success(self.items.get(key))

    def set_item(self, key: str, value: str) -> StorageResult:
        self.items[key] = value
        self.writes.append(key)
        return StorageResult.success()

    def remove_item(self, key: str) -> StorageResult:
        self.items.pop(key, None)
        return StorageResult.success()


@dataclass
class FailingKeyValueStorage(InMemoryKeyValueStorage):
    """Storage whose reads or writes fail on demand."""

    fail_reads: bool = False
    fail_writes: bool = False

    def get_item(self, key: str) -> StorageResult:
        if self.fail_reads:
            return StorageResult.failure("storage disabled")
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> StorageResult:
        if self.fail_writes:
            return StorageResult.failure("quota exceeded")
        return super().set_item(key, value)


@dataclass
class SteppingClock:
    """Clock that advances one second per call."""

    current: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )
    step: timedelta = timedelta(seconds=1)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@dataclass
class FakeMailTransport(MailTransport):
    """Mail transport that records sent emails."""

    sent: list[OutgoingEmail] = field(default_factory=list)
    configured: bool = True
    name: str = "fake"
    requires_sender: bool = True

    def ensure_configured(self) -> None:
        if not self.configured:
            raise MailConfigurationError("Fake transport not configured")

    async def send(self, email: OutgoingEmail) -> str:
        self.sent.append(email)
        return f"fake-{len(self.sent)}"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_dir=tmp_path / "storage",
        mail_transport="resend",
        resend_api_key="re_test",
    )


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def mail_transport() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def container(
    settings: Settings,
    storage: InMemoryKeyValueStorage,
    clock: SteppingClock,
    mail_transport: FakeMailTransport,
) -> AppContainer:
    galleries = GalleryAnnotationRegistry(
        storage=storage,
        comments_slot=settings.comments_slot,
        favorites_slot=settings.favorites_slot,
        clock=clock,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        storage=storage,
        galleries=galleries,
        mail_service=MailService(mail_transport),
        close_resources=close_resources,
    )
