"""
Create and update weekly timesheets.

Hours are always recomputed server-side from daily_hours using the rates
snapshotted on the timesheet when it was created; a later change to the
user's rate never reprices an existing timesheet.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from timesheet_portal.errors import ConflictError, NotFoundError, ValidationError
from timesheet_portal.models.project import Project
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.services import timesheet_policy
from timesheet_portal.services.audit import log_action
from timesheet_portal.services.hours import (
    aggregate_week,
    compute_cost,
    normalize_daily_hours,
    to_storage,
    total_worked_hours,
    week_anchor,
)

logger = logging.getLogger(__name__)

CREATABLE_STATUSES = ("draft", "pending")


def timesheet_reference(timesheet_id: int) -> str:
    return f"TS-{timesheet_id}"


def _apply_hours(timesheet: Timesheet, daily_hours: dict) -> None:
    daily_hours = normalize_daily_hours(daily_hours)
    totals = aggregate_week(daily_hours)
    timesheet.daily_hours = daily_hours
    timesheet.total_hours = to_storage(total_worked_hours(daily_hours))
    timesheet.normal_hours = to_storage(totals.normal_hours)
    timesheet.overtime_hours = to_storage(totals.overtime_hours)
    timesheet.total_cost = to_storage(
        compute_cost(totals.normal_hours, timesheet.normal_rate, totals.overtime_hours, timesheet.overtime_rate)
    )


def find_for_week(db: Session, user_id: int, week_starting: date) -> Optional[Timesheet]:
    return (
        db.query(Timesheet)
        .filter(
            Timesheet.user_id == user_id,
            Timesheet.week_starting == week_anchor(week_starting),
        )
        .first()
    )


def get_timesheet(db: Session, timesheet_id: int) -> Timesheet:
    timesheet = db.get(Timesheet, timesheet_id)
    if not timesheet:
        raise NotFoundError("Timesheet not found")
    return timesheet


def create_timesheet(
    db: Session,
    owner: User,
    *,
    project_id: int,
    week_starting: date,
    daily_hours: dict,
    status: str = "draft",
    notes: Optional[str] = None,
) -> Timesheet:
    if status not in CREATABLE_STATUSES:
        raise ValidationError("New timesheets must be draft or pending")
    if not db.get(Project, project_id):
        raise NotFoundError("Project not found")

    anchor = week_anchor(week_starting)
    if find_for_week(db, owner.id, anchor):
        raise ConflictError(f"A timesheet for the week of {anchor.isoformat()} already exists")

    timesheet = Timesheet(
        user_id=owner.id,
        project_id=project_id,
        week_starting=anchor,
        status=status,
        notes=notes,
        normal_rate=to_storage(owner.normal_rate),
        overtime_rate=to_storage(owner.overtime_rate),
    )
    _apply_hours(timesheet, daily_hours)
    db.add(timesheet)
    db.flush()
    timesheet.reference_number = timesheet_reference(timesheet.id)
    db.commit()
    db.refresh(timesheet)
    logger.info("Created %s for user %s (%s)", timesheet.reference_number, owner.id, status)
    return timesheet


def update_timesheet(
    db: Session,
    actor: User,
    timesheet: Timesheet,
    changes: dict,
) -> Timesheet:
    """Apply a partial update of daily_hours / notes / project_id / status.

    Content and status are checked separately, and both checks run before
    anything is written, so a rejected request leaves the row untouched.
    """
    for field in ("daily_hours", "project_id"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be null")

    content_fields = {"daily_hours", "notes", "project_id"} & changes.keys()
    new_status = changes.get("status")

    if content_fields:
        timesheet_policy.ensure_can_edit(actor, timesheet)
    if new_status is not None:
        timesheet_policy.check_transition(actor, timesheet, new_status)
    if not content_fields and new_status is None:
        timesheet_policy.ensure_can_edit(actor, timesheet)

    if "project_id" in changes and not db.get(Project, changes["project_id"]):
        raise NotFoundError("Project not found")

    previous_status = timesheet.status
    if "daily_hours" in changes:
        _apply_hours(timesheet, changes["daily_hours"])
    if "notes" in changes:
        timesheet.notes = changes["notes"]
    if "project_id" in changes:
        timesheet.project_id = changes["project_id"]
    if new_status is not None:
        timesheet_policy.transition(actor, timesheet, new_status)

    if new_status in ("approved", "rejected") and previous_status != new_status:
        log_action(
            db,
            user_id=actor.id,
            action=f"timesheet.{new_status}",
            resource_type="timesheet",
            resource_id=timesheet.id,
            details={"from": previous_status, "owner_id": timesheet.user_id},
        )

    db.commit()
    db.refresh(timesheet)
    return timesheet


def delete_timesheet(db: Session, actor: User, timesheet: Timesheet) -> None:
    timesheet_policy.ensure_can_delete(actor, timesheet)
    log_action(
        db,
        user_id=actor.id,
        action="timesheet.delete",
        resource_type="timesheet",
        resource_id=timesheet.id,
        details={"status": timesheet.status, "owner_id": timesheet.user_id},
    )
    db.delete(timesheet)
    db.commit()
    logger.info("Timesheet %s deleted by user %s", timesheet.id, actor.id)
