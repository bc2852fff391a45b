"""Complaint model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from campus_repair.database import Base
from campus_repair.models.user import utcnow

CATEGORIES = ("Electrical", "Plumbing", "Classroom", "Lab", "Other")

STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In-Progress"
STATUS_COMPLETED = "Completed"
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

PRIORITIES = ("Low", "Medium", "High")
DEFAULT_PRIORITY = "Medium"


class Complaint(Base):
    """A repair request raised by a student.

    ``student_name`` and ``student_email`` are copied from the owner when the
    complaint is created and are not kept in sync afterwards.
    """
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    category = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    priority = Column(String, nullable=False, default=DEFAULT_PRIORITY)
    photo = Column(String, nullable=True)
    remarks = Column(Text, nullable=False, default="")
    reported_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    student_name = Column(String, nullable=False)
    student_email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Complaint id={self.id} status={self.status} owner={self.reported_by}>"
