"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from campus_repair.database import Base

STUDENT_ROLE = "student"
ADMIN_ROLE = "admin"
ROLES = (STUDENT_ROLE, ADMIN_ROLE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents a student or the administrator."""
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", "role", name="uq_users_email_role"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=STUDENT_ROLE)  # student/admin
    student_id = Column(String, nullable=True)
    department = Column(String, nullable=True)
    # Set to 1 on the admin row only; the unique index caps admins at one.
    admin_slot = Column(Integer, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
