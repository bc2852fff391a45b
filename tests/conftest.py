import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from campus_repair.auth.credentials import CredentialService
from campus_repair.core.container import build_container
from campus_repair.main import create_app
from campus_repair.stores.photos import LocalPhotoStore

ADMIN_EMAIL = 'admin@campus.com'
ADMIN_PASSWORD = 'Admin@123456'


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def credentials() -> CredentialService:
    return CredentialService(secret_key='test-secret', bcrypt_rounds=4)


@pytest.fixture
def photo_store(tmp_path) -> LocalPhotoStore:
    return LocalPhotoStore(tmp_path / 'uploads', max_bytes=1024)


@pytest.fixture
def container(engine, credentials, photo_store):
    container = build_container(engine, credentials, photo_store)
    container.identity_service.bootstrap_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    return container


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client
