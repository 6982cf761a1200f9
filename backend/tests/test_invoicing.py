"""Tests for invoice creation and release."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from timesheet_portal.errors import ConflictError, NotFoundError, ValidationError
from timesheet_portal.models.audit_log import AuditLog
from timesheet_portal.models.invoice import Invoice, InvoiceTimesheet
from timesheet_portal.services import invoicing
from timesheet_portal.services.invoicing import create_invoice, release_invoice

NOW = datetime(2024, 2, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def approved_pair(contractor, make_timesheet):
    return [
        make_timesheet(contractor, week_starting=date(2024, 1, 15), status="approved"),
        make_timesheet(contractor, week_starting=date(2024, 1, 22), status="approved"),
    ]


def test_invoice_from_two_weeks(db, admin, contractor, approved_pair):
    ids = [ts.id for ts in approved_pair]
    invoice = create_invoice(db, contractor.id, ids, 20, 20, actor_id=admin.id, now=NOW)

    assert invoice.reference_number == f"INV-{invoice.id}"
    assert invoice.subtotal == Decimal("1700.00")
    assert invoice.vat_amount == Decimal("340.00")
    assert invoice.cis_amount == Decimal("340.00")
    assert invoice.total_amount == Decimal("1700.00")
    assert invoice.normal_hours == Decimal("70.00")
    assert invoice.overtime_hours == Decimal("10.00")
    assert invoice.status == "pending"
    # alice is paid weekly
    assert invoice.due_date == date(2024, 2, 8)

    for ts in approved_pair:
        db.refresh(ts)
        assert ts.status == "invoiced"
    links = db.query(InvoiceTimesheet).filter(InvoiceTimesheet.invoice_id == invoice.id).all()
    assert sorted(link.timesheet_id for link in links) == sorted(ids)
    assert db.query(AuditLog).filter(AuditLog.action == "invoice.create").count() == 1


def test_subtotal_uses_stored_costs(db, contractor, approved_pair):
    # stored cost wins over anything derivable from daily_hours
    approved_pair[0].total_cost = Decimal("123.45")
    db.commit()

    invoice = create_invoice(db, contractor.id, [ts.id for ts in approved_pair], 0, 0, now=NOW)
    assert invoice.subtotal == Decimal("973.45")
    assert invoice.total_amount == Decimal("973.45")


def test_monthly_default_due_date(db, make_user, make_timesheet):
    bob = make_user("bob")
    ts = make_timesheet(bob, status="approved")
    invoice = create_invoice(db, bob.id, [ts.id], 20, 20, now=datetime(2024, 1, 31, tzinfo=timezone.utc))
    assert invoice.due_date == date(2024, 2, 29)


def test_second_invoice_for_same_timesheets_conflicts(db, contractor, approved_pair):
    ids = [ts.id for ts in approved_pair]
    create_invoice(db, contractor.id, ids, 20, 20, now=NOW)

    with pytest.raises(ConflictError):
        create_invoice(db, contractor.id, ids, 20, 20, now=NOW)
    assert db.query(Invoice).count() == 1


def test_lost_claim_rolls_back_everything(db, contractor, approved_pair, monkeypatch):
    monkeypatch.setattr(invoicing, "claim_for_invoice", lambda db, user_id, ids: 1)

    with pytest.raises(ConflictError):
        create_invoice(db, contractor.id, [ts.id for ts in approved_pair], 20, 20, now=NOW)

    assert db.query(Invoice).count() == 0
    assert db.query(InvoiceTimesheet).count() == 0
    for ts in approved_pair:
        db.refresh(ts)
        assert ts.status == "approved"


def test_unapproved_timesheet_is_rejected(db, contractor, make_timesheet):
    draft = make_timesheet(contractor)
    with pytest.raises(ValidationError):
        create_invoice(db, contractor.id, [draft.id], 20, 20)
    db.refresh(draft)
    assert draft.status == "draft"


def test_other_users_timesheet_is_rejected(db, contractor, make_user, make_timesheet):
    bob = make_user("bob")
    theirs = make_timesheet(bob, status="approved")
    with pytest.raises(ValidationError):
        create_invoice(db, contractor.id, [theirs.id], 20, 20)


def test_empty_selection(db, contractor):
    with pytest.raises(ValidationError):
        create_invoice(db, contractor.id, [], 20, 20)


def test_duplicate_ids(db, contractor, approved_pair):
    ts_id = approved_pair[0].id
    with pytest.raises(ValidationError):
        create_invoice(db, contractor.id, [ts_id, ts_id], 20, 20)


def test_unknown_user(db):
    with pytest.raises(NotFoundError):
        create_invoice(db, 404, [1], 20, 20)


def test_release_returns_timesheets_to_approved(db, contractor, approved_pair):
    ids = [ts.id for ts in approved_pair]
    invoice = create_invoice(db, contractor.id, ids, 20, 20, now=NOW)

    released = release_invoice(db, invoice)
    db.commit()

    assert sorted(released) == sorted(ids)
    assert db.query(Invoice).count() == 0
    assert db.query(InvoiceTimesheet).count() == 0
    for ts in approved_pair:
        db.refresh(ts)
        assert ts.status == "approved"

    again = create_invoice(db, contractor.id, ids, 20, 20, now=NOW)
    assert again.reference_number == f"INV-{again.id}"
