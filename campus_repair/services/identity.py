import logging

from campus_repair.auth.credentials import CredentialService
from campus_repair.core.errors import DuplicateEmail, InvalidCredentials, ValidationError
from campus_repair.models.user import ROLES, STUDENT_ROLE, User
from campus_repair.stores.base import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def _optional(value: str | None) -> str | None:
    cleaned = _clean(value)
    return cleaned or None


class IdentityService:
    """Registration, role-scoped login and admin bootstrap."""

    def __init__(self, users: UserRepository, credentials: CredentialService) -> None:
        self._users = users
        self._credentials = credentials

    def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        student_id: str | None = None,
        department: str | None = None,
    ) -> tuple[str, User]:
        name_clean = _clean(name)
        email_clean = _clean(email)
        if not name_clean or not email_clean or not password or not confirm_password:
            raise ValidationError("Please provide all required fields")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        if self._users.find_by_email(email_clean) is not None:
            raise DuplicateEmail()

        user = self._users.create(
            name=name_clean,
            email=email_clean,
            hashed_password=self._credentials.hash_password(password),
            role=STUDENT_ROLE,
            student_id=_optional(student_id),
            department=_optional(department),
        )
        logger.info("Registered student %s (id=%s)", user.email, user.id)
        return self._credentials.issue_token(user), user

    def login(self, email: str | None, password: str | None, role: str = STUDENT_ROLE) -> tuple[str, User]:
        """Authenticate against accounts of ``role`` only.

        Unknown email, wrong password and missing input all raise the same
        error so callers cannot discover which emails are registered.
        """
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")

        email_clean = _clean(email)
        if not email_clean or not password:
            raise InvalidCredentials()

        user = self._users.find_by_email(email_clean, role=role)
        if user is None or not self._credentials.verify_password(password, user.hashed_password):
            raise InvalidCredentials()
        return self._credentials.issue_token(user), user

    def bootstrap_admin(self, email: str | None, password: str | None, name: str = "Admin User") -> tuple[User | None, bool]:
        email_clean = _clean(email)
        if not email_clean or not password:
            logger.warning("Admin bootstrap skipped: ADMIN_EMAIL and ADMIN_PASSWORD must both be set")
            return None, False

        user, created = self._users.insert_admin_if_absent(
            name=_clean(name) or "Admin User",
            email=email_clean,
            hashed_password=self._credentials.hash_password(password),
        )
        if created:
            logger.info("Admin user created for %s", user.email)
        else:
            logger.debug("Admin user already present (id=%s)", user.id)
        return user, created

    def get_user(self, user_id: int) -> User | None:
        return self._users.get_by_id(user_id)
