from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from campus_repair.models.complaint import Complaint
from campus_repair.models.user import User


class UserRepository(Protocol):
    """Abstract storage for student and admin accounts."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def find_by_email(self, email: str, role: Optional[str] = None) -> Optional[User]:
        ...

    def create(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: str,
        student_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        ...

    def insert_admin_if_absent(self, name: str, email: str, hashed_password: str) -> tuple[User, bool]:
        ...


class ComplaintRepository(Protocol):
    """Abstract storage for complaint records."""

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
        ...

    def get(self, complaint_id: int) -> Optional[Complaint]:
        ...

    def list_by_owner(self, owner_id: int) -> List[Complaint]:
        ...

    def list_all(self) -> List[Complaint]:
        ...

    def update(self, complaint_id: int, fields: Dict[str, object]) -> Optional[Complaint]:
        ...

    def delete(self, complaint_id: int) -> Optional[Complaint]:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...

    def delete_all(self) -> int:
        ...
