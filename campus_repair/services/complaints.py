import logging

from campus_repair.auth.credentials import Claims
from campus_repair.auth.policy import Action, authorize
from campus_repair.core.errors import Forbidden, NotFound, OwnerNotFound, ValidationError
from campus_repair.models.complaint import (
    CATEGORIES,
    PRIORITIES,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    STATUSES,
    Complaint,
)
from campus_repair.models.user import utcnow
from campus_repair.stores.base import ComplaintRepository, UserRepository
from campus_repair.stores.photos import PhotoStore, PhotoUpload

logger = logging.getLogger(__name__)


def parse_complaint_id(raw: int | str) -> int:
    """Turn a path id into a store id; anything unusable is simply not found."""
    try:
        complaint_id = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise NotFound() from exc
    if complaint_id <= 0:
        raise NotFound()
    return complaint_id


class ComplaintService:
    """Complaint lifecycle: submission, listing, admin triage and stats.

    Every operation takes the verified token claims of the caller and checks
    them against the access policy before touching a store. Status may move
    between any of the three values in any order.
    """

    def __init__(
        self,
        complaints: ComplaintRepository,
        users: UserRepository,
        photos: PhotoStore,
    ) -> None:
        self._complaints = complaints
        self._users = users
        self._photos = photos

    def submit(
        self,
        claims: Claims | None,
        title: str | None,
        description: str | None,
        location: str | None,
        category: str | None,
        photo: PhotoUpload | None = None,
    ) -> Complaint:
        authorize(claims, Action.SUBMIT_COMPLAINT)

        title_clean = (title or "").strip()
        location_clean = (location or "").strip()
        category_clean = (category or "").strip()
        if not title_clean or not (description or "").strip() or not location_clean or not category_clean:
            raise ValidationError("Please provide all required fields")
        if category_clean not in CATEGORIES:
            raise ValidationError(f"Invalid category. Choose one of: {', '.join(CATEGORIES)}")

        owner = self._users.get_by_id(claims.user_id)
        if owner is None:
            raise OwnerNotFound()

        # Saved before the row so a failed write never leaves a dangling reference.
        photo_ref = None
        if photo is not None and photo.data:
            photo_ref = self._photos.save(photo)

        try:
            complaint = self._complaints.create(
                title=title_clean,
                description=description,
                location=location_clean,
                category=category_clean,
                reported_by=owner.id,
                student_name=owner.name,
                student_email=owner.email,
                photo=photo_ref,
            )
        except Exception:
            if photo_ref:
                self._photos.delete(photo_ref)
            raise

        logger.info("Complaint %s created by user %s", complaint.id, owner.id)
        return complaint

    def list_mine(self, claims: Claims | None) -> list[Complaint]:
        authorize(claims, Action.LIST_OWN_COMPLAINTS)
        return self._complaints.list_by_owner(claims.user_id)

    def list_all(self, claims: Claims | None) -> list[Complaint]:
        authorize(claims, Action.LIST_ALL_COMPLAINTS)
        complaints = self._complaints.list_all()
        logger.debug("Returning %d complaints to admin %s", len(complaints), claims.user_id)
        return complaints

    def get(self, claims: Claims | None, complaint_id: int | str) -> Complaint:
        authorize(claims, Action.READ_COMPLAINT, owner_id=claims.user_id if claims else None)
        complaint = self._complaints.get(parse_complaint_id(complaint_id))
        if complaint is None:
            raise NotFound()
        try:
            authorize(claims, Action.READ_COMPLAINT, owner_id=complaint.reported_by)
        except Forbidden:
            raise NotFound() from None
        return complaint

    def update(
        self,
        claims: Claims | None,
        complaint_id: int | str,
        status: str | None = None,
        priority: str | None = None,
        remarks: str | None = None,
    ) -> Complaint:
        """Apply a sparse admin update.

        ``None`` or an empty status or priority means "not supplied" and
        leaves the stored value alone. All values are validated before
        anything is written.
        """
        authorize(claims, Action.UPDATE_COMPLAINT)
        status = status or None
        priority = priority or None

        if status is not None and status not in STATUSES:
            raise ValidationError("Invalid status")
        if priority is not None and priority not in PRIORITIES:
            raise ValidationError("Invalid priority")

        fields: dict[str, object] = {"updated_at": utcnow()}
        if status is not None:
            fields["status"] = status
        if priority is not None:
            fields["priority"] = priority
        if remarks is not None:
            fields["remarks"] = remarks

        complaint = self._complaints.update(parse_complaint_id(complaint_id), fields)
        if complaint is None:
            raise NotFound()

        logger.info(
            "Complaint %s updated by admin %s: %s",
            complaint.id,
            claims.user_id,
            sorted(name for name in fields if name != "updated_at"),
        )
        return complaint

    def delete(self, claims: Claims | None, complaint_id: int | str) -> None:
        authorize(claims, Action.DELETE_COMPLAINT)
        removed = self._complaints.delete(parse_complaint_id(complaint_id))
        if removed is None:
            raise NotFound()
        if removed.photo:
            self._photos.delete(removed.photo)
        logger.info("Complaint %s deleted by admin %s", removed.id, claims.user_id)

    def stats(self, claims: Claims | None) -> dict[str, int]:
        authorize(claims, Action.VIEW_STATS)
        counts = self._complaints.count_by_status()
        pending = counts.get(STATUS_PENDING, 0)
        in_progress = counts.get(STATUS_IN_PROGRESS, 0)
        completed = counts.get(STATUS_COMPLETED, 0)
        return {
            "total": pending + in_progress + completed,
            "pending": pending,
            "inProgress": in_progress,
            "completed": completed,
        }
