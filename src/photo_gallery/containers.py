"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from photo_gallery.adapters.file_storage import FileKeyValueStorage
from photo_gallery.adapters.resend_mail_transport import ResendMailTransport
from photo_gallery.adapters.smtp_mail_transport import SmtpMailTransport
from photo_gallery.adapters.stub_mail_transport import StubMailTransport
from photo_gallery.config import Settings, parse_quota
from photo_gallery.services.annotations import KeyValueStorage
from photo_gallery.services.gallery import GalleryAnnotationRegistry
from photo_gallery.services.mail import MailService, MailTransport


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: KeyValueStorage
    galleries: GalleryAnnotationRegistry
    mail_service: MailService
    close_resources: Callable[[], Awaitable[None]]


def build_mail_transport(settings: Settings) -> MailTransport:
    """Create the mail transport selected by settings."""
    if settings.mail_transport == "smtp":
        return SmtpMailTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            secure=settings.smtp_secure,
            from_name=settings.mail_from_name,
        )
    if settings.mail_transport == "stub":
        return StubMailTransport(
            gmail_user=settings.gmail_user,
            gmail_app_password=settings.gmail_app_password,
        )
    return ResendMailTransport.create(
        api_key=settings.resend_api_key, base_url=settings.resend_base_url
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = FileKeyValueStorage(
        root=resolved_settings.storage_dir,
        quota_bytes=parse_quota(resolved_settings.storage_quota_bytes),
    )
    galleries = GalleryAnnotationRegistry(
        storage=storage,
        comments_slot=resolved_settings.comments_slot,
        favorites_slot=resolved_settings.favorites_slot,
        legacy_comments_slot=resolved_settings.legacy_comments_slot,
        legacy_favorites_slot=resolved_settings.legacy_favorites_slot,
        max_open_galleries=resolved_settings.max_open_galleries,
    )
    transport = build_mail_transport(resolved_settings)
    mail_service = MailService(transport)

    async def close_resources() -> None:
        if isinstance(transport, ResendMailTransport):
            await transport.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        galleries=galleries,
        mail_service=mail_service,
        close_resources=close_resources,
    )
