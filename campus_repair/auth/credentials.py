from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from campus_repair.core import config
from campus_repair.core.errors import InvalidToken
from campus_repair.models.user import ROLES, User

# bcrypt ignores everything past 72 bytes; newer releases reject it outright.
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class Claims:
    """Identity carried by a verified session token."""

    user_id: int
    email: str
    role: str


def _password_bytes(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class CredentialService:
    """Password hashing and signed session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_minutes: int = 7 * 24 * 60,
        bcrypt_rounds: int = 12,
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET_KEY is not configured.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_minutes = expires_minutes
        self._bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_config(cls) -> "CredentialService":
        return cls(
            secret_key=config.JWT_SECRET_KEY,
            algorithm=config.JWT_ALGORITHM,
            expires_minutes=config.JWT_EXPIRES_MINUTES,
            bcrypt_rounds=config.BCRYPT_ROUNDS,
        )

    def issue_token(self, user: User, expires_minutes: int | None = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=expires_minutes or self._expires_minutes)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_token(self, token: str) -> Claims:
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidToken() from exc

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("Not authorized, invalid token subject") from exc

        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(email, str) or role not in ROLES:
            raise InvalidToken("Not authorized, invalid token claims")
        return Claims(user_id=user_id, email=email, role=role)

    def hash_password(self, plaintext: str) -> str:
        hashed = bcrypt.hashpw(_password_bytes(plaintext), bcrypt.gensalt(rounds=self._bcrypt_rounds))
        return hashed.decode("utf-8")

    def verify_password(self, plaintext: str, hashed: str | None) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(_password_bytes(plaintext), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            return False
