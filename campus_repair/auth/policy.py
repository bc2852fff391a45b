"""Role and ownership rules for complaint operations.

``authorize`` is consulted by the services on every call. It returns ``None``
when the action is allowed and raises otherwise; it keeps no state.
"""

from enum import Enum

from campus_repair.auth.credentials import Claims
from campus_repair.core.errors import Forbidden, Unauthorized
from campus_repair.models.user import ADMIN_ROLE, STUDENT_ROLE


class Action(str, Enum):
    SUBMIT_COMPLAINT = "submit_complaint"
    LIST_OWN_COMPLAINTS = "list_own_complaints"
    READ_COMPLAINT = "read_complaint"
    LIST_ALL_COMPLAINTS = "list_all_complaints"
    UPDATE_COMPLAINT = "update_complaint"
    DELETE_COMPLAINT = "delete_complaint"
    VIEW_STATS = "view_stats"


STUDENT_ACTIONS = frozenset({
    Action.SUBMIT_COMPLAINT,
    Action.LIST_OWN_COMPLAINTS,
    Action.READ_COMPLAINT,
})

ADMIN_ACTIONS = frozenset({
    Action.READ_COMPLAINT,
    Action.LIST_ALL_COMPLAINTS,
    Action.UPDATE_COMPLAINT,
    Action.DELETE_COMPLAINT,
    Action.VIEW_STATS,
})

# Student actions that touch a single existing complaint must match its owner.
_OWNER_SCOPED = frozenset({Action.READ_COMPLAINT})


def authorize(claims: Claims | None, action: Action, owner_id: int | None = None) -> None:
    if claims is None:
        raise Unauthorized()

    if claims.role == ADMIN_ROLE:
        if action not in ADMIN_ACTIONS:
            raise Forbidden("Only students can perform this action")
        return

    if claims.role == STUDENT_ROLE:
        if action not in STUDENT_ACTIONS:
            raise Forbidden("Admin access required")
        if action in _OWNER_SCOPED and owner_id != claims.user_id:
            raise Forbidden("You can only view your own complaints")
        return

    raise Forbidden()
