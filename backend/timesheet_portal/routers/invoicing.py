"""Invoicing router: build invoices from approved timesheets and manage them."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from timesheet_portal.database import get_db
from timesheet_portal.dependencies import require_admin
from timesheet_portal.models.invoice import Invoice, InvoiceTimesheet
from timesheet_portal.models.timesheet import Timesheet
from timesheet_portal.models.user import User
from timesheet_portal.routers.timesheets import list_items
from timesheet_portal.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceListItem,
    InvoiceResponse,
    InvoiceStatusUpdate,
)
from timesheet_portal.schemas.timesheet import TimesheetListItem
from timesheet_portal.services.audit import log_action
from timesheet_portal.services.invoicing import create_invoice as create_invoice_for_user
from timesheet_portal.services.invoicing import release_invoice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoicing", tags=["Invoicing"])
admin_router = APIRouter(prefix="/api/admin/invoices", tags=["Invoicing"])


def _get_invoice_or_404(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if not invoice:
        raise HTTPException(404, "Invoice not found")
    return invoice


# ── Building invoices ──


@router.get("/timesheets", response_model=list[TimesheetListItem])
def approved_timesheets(
    user_id: int = Query(..., alias="userId"),
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(Timesheet).filter(
        Timesheet.user_id == user_id,
        Timesheet.status == "approved",
    )
    return list_items(q.order_by(Timesheet.week_starting.asc()))


@router.post("/create", status_code=201)
def create_invoice(
    body: InvoiceCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    invoice = create_invoice_for_user(
        db,
        body.user_id,
        body.timesheet_ids,
        body.vat_rate,
        body.cis_rate,
        actor_id=admin.id,
    )
    return {
        "message": "Invoice created successfully",
        "invoice": InvoiceResponse.model_validate(invoice),
    }


# ── Admin management ──


@admin_router.get("", response_model=list[InvoiceListItem])
def list_invoices(
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(Invoice, User.username)
        .outerjoin(User, User.id == Invoice.user_id)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
    items = []
    for invoice, username in rows:
        item = InvoiceListItem.model_validate(invoice)
        item.username = username
        items.append(item)
    return items


@admin_router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
def get_invoice(
    invoice_id: int,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    invoice = _get_invoice_or_404(db, invoice_id)
    owner = db.get(User, invoice.user_id)

    q = (
        db.query(Timesheet)
        .join(InvoiceTimesheet, InvoiceTimesheet.timesheet_id == Timesheet.id)
        .filter(InvoiceTimesheet.invoice_id == invoice.id)
        .order_by(Timesheet.week_starting.asc())
    )
    detail = InvoiceDetailResponse.model_validate(invoice)
    detail.username = owner.username if owner else None
    detail.timesheets = list_items(q)
    return detail


@admin_router.put("/{invoice_id}")
def update_invoice_status(
    invoice_id: int,
    body: InvoiceStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    invoice = _get_invoice_or_404(db, invoice_id)
    previous = invoice.status
    invoice.status = body.status
    log_action(
        db,
        user_id=admin.id,
        action="invoice.status",
        resource_type="invoice",
        resource_id=invoice.id,
        details={"from": previous, "to": body.status},
    )
    db.commit()
    return {"message": "Invoice status updated"}


@admin_router.delete("/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    invoice = _get_invoice_or_404(db, invoice_id)
    reference = invoice.reference_number
    released = release_invoice(db, invoice)
    log_action(
        db,
        user_id=admin.id,
        action="invoice.delete",
        resource_type="invoice",
        resource_id=invoice_id,
        details={"reference_number": reference, "released_timesheet_ids": released},
    )
    db.commit()
    logger.info("%s deleted by %s; timesheets %s back to approved", reference, admin.id, released)
    return {"message": "Invoice deleted successfully"}
