import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from campus_repair.core.errors import DuplicateEmail, StoreUnavailable
from campus_repair.models.complaint import STATUSES, Complaint
from campus_repair.models.user import ADMIN_ROLE, User, utcnow

logger = logging.getLogger(__name__)

# Only these complaint columns may change after creation.
MUTABLE_COMPLAINT_FIELDS = frozenset({"status", "priority", "remarks", "updated_at"})


class _SqlStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            if isinstance(exc, IntegrityError):
                raise
            logger.exception("Store operation failed")
            raise StoreUnavailable() from exc
        finally:
            db.close()


class SqlUserStore(_SqlStore):
    """SQLAlchemy-backed identity store."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            return db.get(User, user_id)

    def find_by_email(self, email: str, role: Optional[str] = None) -> Optional[User]:
        with self._session() as db:
            query = db.query(User).filter(User.email == email)
            if role is not None:
                query = query.filter(User.role == role)
            return query.order_by(User.id.asc()).first()

    def create(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: str,
        student_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=hashed_password,
            role=role,
            student_id=student_id,
            department=department,
            admin_slot=1 if role == ADMIN_ROLE else None,
        )
        try:
            with self._session() as db:
                db.add(user)
                db.commit()
                db.refresh(user)
        except IntegrityError as exc:
            raise DuplicateEmail() from exc
        return user

    def insert_admin_if_absent(self, name: str, email: str, hashed_password: str) -> tuple[User, bool]:
        """Create the single admin account unless one already exists.

        The unique ``admin_slot`` column makes the insert itself the check, so
        two processes starting together still end up with one admin.
        """
        try:
            return self.create(name, email, hashed_password, ADMIN_ROLE), True
        except DuplicateEmail:
            with self._session() as db:
                existing = db.query(User).filter(User.role == ADMIN_ROLE).first()
            if existing is None:
                raise
            return existing, False


class SqlComplaintStore(_SqlStore):
    """SQLAlchemy-backed complaint store."""

    def create(
        self,
        *,
        title: str,
        description: str,
        location: str,
        category: str,
        reported_by: int,
        student_name: str,
        student_email: str,
        photo: Optional[str] = None,
    ) -> Complaint:
        now = utcnow()
        complaint = Complaint(
            title=title,
            description=description,
            location=location,
            category=category,
            reported_by=reported_by,
            student_name=student_name,
            student_email=student_email,
            photo=photo,
            remarks="",
            created_at=now,
            updated_at=now,
        )
        try:
            with self._session() as db:
                db.add(complaint)
                db.commit()
                db.refresh(complaint)
        except IntegrityError as exc:
            logger.error("Complaint rejected by database constraints: %s", exc)
            raise StoreUnavailable() from exc
        return complaint

    def get(self, complaint_id: int) -> Optional[Complaint]:
        with self._session() as db:
            return db.get(Complaint, complaint_id)

    def list_by_owner(self, owner_id: int) -> List[Complaint]:
        with self._session() as db:
            return (
                db.query(Complaint)
                .filter(Complaint.reported_by == owner_id)
                .order_by(Complaint.created_at.desc(), Complaint.id.desc())
                .all()
            )

    def list_all(self) -> List[Complaint]:
        with self._session() as db:
            return db.query(Complaint).order_by(Complaint.created_at.desc(), Complaint.id.desc()).all()

    def update(self, complaint_id: int, fields: Dict[str, object]) -> Optional[Complaint]:
        illegal = set(fields) - MUTABLE_COMPLAINT_FIELDS
        if illegal:
            raise ValueError(f"Complaint fields are immutable: {', '.join(sorted(illegal))}")

        with self._session() as db:
            complaint = db.get(Complaint, complaint_id)
            if complaint is None:
                return None
            for name, value in fields.items():
                setattr(complaint, name, value)
            db.commit()
            db.refresh(complaint)
            return complaint

    def delete(self, complaint_id: int) -> Optional[Complaint]:
        with self._session() as db:
            complaint = db.get(Complaint, complaint_id)
            if complaint is None:
                return None
            db.delete(complaint)
            db.commit()
            return complaint

    def count_by_status(self) -> Dict[str, int]:
        with self._session() as db:
            rows = db.query(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status).all()
        counts = {status: 0 for status in STATUSES}
        for status, count in rows:
            if status in counts:
                counts[status] = count
        return counts

    def delete_all(self) -> int:
        with self._session() as db:
            removed = db.query(Complaint).delete()
            db.commit()
            return removed
