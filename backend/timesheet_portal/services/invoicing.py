"""
Invoice creation from approved timesheets.

All writes (invoice row, reference number, link rows, timesheet claim, audit
entry) happen in one database transaction. The timesheet claim is a
conditional UPDATE on status='approved', so two concurrent requests for the
same timesheets cannot both succeed: the loser sees a short row count and
rolls back everything it wrote.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from timesheet_portal.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from timesheet_portal.models.invoice import Invoice, InvoiceTimesheet
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.services.audit import log_action
from timesheet_portal.services.hours import aggregate_many, to_storage
from timesheet_portal.services.invoice_calculator import DEFAULT_PAYMENT_FREQUENCY, calculate, due_date
from timesheet_portal.services.timesheet_policy import claim_for_invoice

logger = logging.getLogger(__name__)


def invoice_reference(invoice_id: int) -> str:
    return f"INV-{invoice_id}"


def _select_approved(db: Session, user_id: int, ids: list[int]) -> list[Timesheet]:
    selected = (
        db.query(Timesheet)
        .filter(
            Timesheet.id.in_(ids),
            Timesheet.user_id == user_id,
            Timesheet.status == "approved",
        )
        .all()
    )
    if len(selected) == len(ids):
        return selected

    already_invoiced = (
        db.query(Timesheet.id)
        .filter(
            Timesheet.id.in_(ids),
            Timesheet.user_id == user_id,
            Timesheet.status == "invoiced",
        )
        .count()
    )
    if already_invoiced:
        raise ConflictError("One or more timesheets have already been invoiced.")
    raise ValidationError("One or more timesheets are invalid or not approved.")


def create_invoice(
    db: Session,
    user_id: int,
    timesheet_ids: Sequence[int],
    vat_rate,
    cis_rate,
    *,
    actor_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Invoice:
    ids = list(timesheet_ids)
    if not ids:
        raise ValidationError("At least one timesheet is required.")
    if len(set(ids)) != len(ids):
        raise ValidationError("One or more timesheets are invalid or not approved.")

    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    timesheets = _select_approved(db, user_id, ids)

    now = now or datetime.now(timezone.utc)
    payment_frequency = user.payment_frequency or DEFAULT_PAYMENT_FREQUENCY
    totals = aggregate_many(timesheets)
    amounts = calculate(totals.subtotal, vat_rate, cis_rate)

    try:
        invoice = Invoice(
            user_id=user_id,
            # placeholder until the primary key is known
            reference_number=f"TEMP-{uuid.uuid4().hex}",
            subtotal=to_storage(totals.subtotal),
            vat_rate=Decimal(str(vat_rate)),
            cis_rate=Decimal(str(cis_rate)),
            vat_amount=to_storage(amounts.vat_amount),
            cis_amount=to_storage(amounts.cis_amount),
            total_amount=to_storage(amounts.total_amount),
            normal_hours=to_storage(totals.normal_hours),
            overtime_hours=to_storage(totals.overtime_hours),
            normal_rate=None,
            overtime_rate=None,
            status="pending",
            created_at=now,
            due_date=due_date(now, payment_frequency),
        )
        db.add(invoice)
        db.flush()

        invoice.reference_number = invoice_reference(invoice.id)
        db.add_all(InvoiceTimesheet(invoice_id=invoice.id, timesheet_id=ts_id) for ts_id in ids)
        db.flush()

        claimed = claim_for_invoice(db, user_id, ids)
        if claimed != len(ids):
            db.rollback()
            logger.warning(
                "Invoice for user %s lost the claim on timesheets %s (%d/%d)",
                user_id, ids, claimed, len(ids),
            )
            raise ConflictError("One or more timesheets have already been invoiced.")

        log_action(
            db,
            user_id=actor_id,
            action="invoice.create",
            resource_type="invoice",
            resource_id=invoice.id,
            details={
                "reference_number": invoice.reference_number,
                "user_id": user_id,
                "timesheet_ids": ids,
                "total_amount": str(invoice.total_amount),
            },
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Invoice for user %s hit a constraint: %s", user_id, e)
        raise ConflictError("One or more timesheets have already been invoiced.") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create invoice for user %s", user_id)
        raise PersistenceError("Failed to create invoice") from e

    db.refresh(invoice)
    logger.info(
        "Created %s for user %s: %d timesheet(s), total %s",
        invoice.reference_number, user_id, len(ids), invoice.total_amount,
    )
    return invoice


def release_invoice(db: Session, invoice: Invoice) -> list[int]:
    """Delete an invoice and return its timesheets to approved (caller commits)."""
    links = db.query(InvoiceTimesheet).filter(InvoiceTimesheet.invoice_id == invoice.id).all()
    timesheet_ids = [link.timesheet_id for link in links]
    if timesheet_ids:
        (
            db.query(Timesheet)
            .filter(Timesheet.id.in_(timesheet_ids), Timesheet.status == "invoiced")
            .update({Timesheet.status: "approved"}, synchronize_session="fetch")
        )
    for link in links:
        db.delete(link)
    db.delete(invoice)
    return timesheet_ids
