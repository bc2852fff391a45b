import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine

from campus_repair.auth.credentials import CredentialService
from campus_repair.core import config
from campus_repair.database import connect_engine, create_session_factory, initialize_schema
from campus_repair.services.complaints import ComplaintService
from campus_repair.services.identity import IdentityService
from campus_repair.stores.photos import LocalPhotoStore
from campus_repair.stores.sql import SqlComplaintStore, SqlUserStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Handles shared by every request for the lifetime of the application."""

    engine: Engine
    credentials: CredentialService
    users: SqlUserStore
    complaints: SqlComplaintStore
    photos: LocalPhotoStore
    identity_service: IdentityService
    complaint_service: ComplaintService

    def close(self) -> None:
        self.engine.dispose()


def build_container(
    engine: Engine,
    credentials: CredentialService,
    photos: LocalPhotoStore,
) -> ServiceContainer:
    initialize_schema(engine)
    session_factory = create_session_factory(engine)
    users = SqlUserStore(session_factory)
    complaints = SqlComplaintStore(session_factory)
    photos.ensure_directory()
    return ServiceContainer(
        engine=engine,
        credentials=credentials,
        users=users,
        complaints=complaints,
        photos=photos,
        identity_service=IdentityService(users, credentials),
        complaint_service=ComplaintService(complaints, users, photos),
    )


def build_container_from_config() -> ServiceContainer:
    container = build_container(
        engine=connect_engine(config.database_urls()),
        credentials=CredentialService.from_config(),
        photos=LocalPhotoStore(config.UPLOAD_DIR, max_bytes=config.MAX_PHOTO_BYTES),
    )
    container.identity_service.bootstrap_admin(config.ADMIN_EMAIL, config.ADMIN_PASSWORD, config.ADMIN_NAME)
    return container
