"""
Timesheet status machine and the single authorization policy behind it.

States: draft, pending, approved, rejected, invoiced (terminal).

Owner transitions:   draft -> pending, rejected -> pending
Admin transitions:   any non-terminal status -> any status except invoiced
System transition:   approved -> invoiced (invoice creation only)

Owners may edit hours/notes or delete only while the timesheet is draft or
rejected. Admins may edit or delete anything that is not yet invoiced.
Every check is answered by is_allowed(); nothing here mutates a record
unless the check passed.
"""

import logging
from typing import Iterable

from sqlalchemy import update
from sqlalchemy.orm import Session

from timesheet_portal.errors import AuthorizationError, ValidationError
from timesheet_portal.models.timesheet import Timesheet, TIMESHEET_STATUSES

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {"invoiced"}
OWNER_UNLOCKED_STATUSES = {"draft", "rejected"}

OWNER_TRANSITIONS = {
    ("draft", "pending"),
    ("rejected", "pending"),
}
SYSTEM_TRANSITIONS = {
    ("approved", "invoiced"),
}

EDIT = "edit"
DELETE = "delete"


def transition_action(target: str) -> str:
    return f"transition:{target}"


def is_allowed(is_admin: bool, is_owner: bool, status: str, action: str) -> bool:
    """Answer whether an actor may perform action on a timesheet in status."""
    if status in TERMINAL_STATUSES:
        return False
    if not is_admin and not is_owner:
        return False

    if action in (EDIT, DELETE):
        return is_admin or status in OWNER_UNLOCKED_STATUSES

    if action.startswith("transition:"):
        target = action.split(":", 1)[1]
        if target not in TIMESHEET_STATUSES or target in TERMINAL_STATUSES:
            return False
        if is_admin:
            return True
        if target == status:
            return status in OWNER_UNLOCKED_STATUSES
        return (status, target) in OWNER_TRANSITIONS

    return False


def can_edit(is_admin: bool, is_owner: bool, status: str) -> bool:
    return is_allowed(is_admin, is_owner, status, EDIT)


def _actor_flags(actor, timesheet: Timesheet) -> tuple[bool, bool]:
    return actor.role == "admin", timesheet.user_id == actor.id


def ensure_can_edit(actor, timesheet: Timesheet) -> None:
    is_admin, is_owner = _actor_flags(actor, timesheet)
    if not is_admin and not is_owner:
        raise AuthorizationError("Forbidden")
    if not can_edit(is_admin, is_owner, timesheet.status):
        raise AuthorizationError("Forbidden: Timesheet is locked.")


def ensure_can_delete(actor, timesheet: Timesheet) -> None:
    is_admin, is_owner = _actor_flags(actor, timesheet)
    if not is_admin and not is_owner:
        raise AuthorizationError("Forbidden: Cannot delete this timesheet")
    if not is_allowed(is_admin, is_owner, timesheet.status, DELETE):
        raise AuthorizationError(f"Forbidden: Cannot delete a {timesheet.status} timesheet")


def check_transition(actor, timesheet: Timesheet, target: str) -> None:
    if target not in TIMESHEET_STATUSES:
        raise ValidationError(f"Unknown status '{target}'")
    if target == "invoiced":
        raise AuthorizationError("Timesheets are invoiced only through invoice creation")
    is_admin, is_owner = _actor_flags(actor, timesheet)
    if not is_allowed(is_admin, is_owner, timesheet.status, transition_action(target)):
        raise AuthorizationError(
            f"Forbidden: cannot move timesheet from {timesheet.status} to {target}"
        )


def transition(actor, timesheet: Timesheet, target: str) -> Timesheet:
    """Validate and apply a user-driven status change (caller commits)."""
    check_transition(actor, timesheet, target)
    if timesheet.status != target:
        logger.info(
            "Timesheet %s: %s -> %s by user %s",
            timesheet.id, timesheet.status, target, actor.id,
        )
    timesheet.status = target
    return timesheet


def claim_for_invoice(db: Session, user_id: int, timesheet_ids: Iterable[int]) -> int:
    """Conditionally move approved timesheets to invoiced.

    Only rows still approved and owned by user_id are touched; the returned
    row count tells the caller whether every timesheet was claimed.
    """
    ((source, target),) = SYSTEM_TRANSITIONS
    result = db.execute(
        update(Timesheet)
        .where(
            Timesheet.id.in_(list(timesheet_ids)),
            Timesheet.user_id == user_id,
            Timesheet.status == source,
        )
        .values(status=target)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
