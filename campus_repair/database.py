import logging
from typing import Iterable

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from campus_repair.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def _redact(url: str, position: int) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except (SQLAlchemyError, ValueError):
        if "@" in url:
            return f"<unparseable url #{position}>"
        return url


def connect_engine(urls: Iterable[str]) -> Engine:
    """Return an engine for the first URL that accepts a connection.

    Candidates are tried in order. When none connect, a single
    ``StoreUnavailable`` lists every attempt.
    """
    failures: list[str] = []
    for position, url in enumerate(urls, start=1):
        label = _redact(url, position)
        try:
            engine = create_engine(url, **_engine_options(url))
        except (SQLAlchemyError, ValueError, ImportError) as exc:
            logger.warning("Database URL %s rejected: %s", label, exc)
            failures.append(f"{label}: {exc}")
            continue

        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("Database connect failed for %s: %s", label, exc)
            failures.append(f"{label}: {exc}")
            engine.dispose()
            continue

        logger.info("Database connected -> %s", label)
        return engine

    logger.error("All database connection attempts failed")
    raise StoreUnavailable("All database connection attempts failed: " + "; ".join(failures))


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def initialize_schema(engine: Engine) -> None:
    # Models register themselves on Base when imported.
    from campus_repair.models import complaint, user  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        logger.exception("Database initialization failed. Check DATABASE_URL and credentials.")
        raise StoreUnavailable() from exc
