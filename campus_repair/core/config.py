import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {key} must be an integer") from exc


APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)

DEFAULT_DATABASE_URL = "sqlite:///./campus_repair.db"


def database_urls() -> list[str]:
    """Candidate database URLs, tried in order until one connects."""
    urls = _get_list(os.getenv("DATABASE_URLS"))
    single = os.getenv("DATABASE_URL")
    if single and single.strip() not in urls:
        urls.append(single.strip())
    return urls or [DEFAULT_DATABASE_URL]


JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = _get_int("JWT_EXPIRES_MINUTES", 7 * 24 * 60)
BCRYPT_ROUNDS = _get_int("BCRYPT_ROUNDS", 12)

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@campus.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin@123456")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin User")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_PHOTO_BYTES = _get_int("MAX_PHOTO_BYTES", 5 * 1024 * 1024)

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS")) or ["*"]

HOST = os.getenv("HOST", "0.0.0.0")


def server_ports() -> list[int]:
    raw = _get_list(os.getenv("PORTS")) or [os.getenv("PORT", "5000")]
    ports = []
    for item in raw:
        try:
            ports.append(int(item))
        except ValueError as exc:
            raise RuntimeError(f"Invalid port in PORTS: {item!r}") from exc
    return ports


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if JWT_EXPIRES_MINUTES <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be positive.")
