import os
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from datetime import date, datetime

from timesheet_portal.schemas.timesheet import TimesheetListItem

DEFAULT_VAT_RATE = Decimal(os.getenv("DEFAULT_VAT_RATE", "20"))
DEFAULT_CIS_RATE = Decimal(os.getenv("DEFAULT_CIS_RATE", "20"))


class InvoiceCreate(BaseModel):
    user_id: int
    # emptiness is reported by the invoicing service as a 400
    timesheet_ids: list[int]
    vat_rate: Decimal = Field(default=DEFAULT_VAT_RATE, ge=0, le=100)
    cis_rate: Decimal = Field(default=DEFAULT_CIS_RATE, ge=0, le=100)


class InvoiceStatusUpdate(BaseModel):
    status: Literal["pending", "paid", "overdue"]


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reference_number: str
    user_id: int
    subtotal: float
    vat_rate: float
    cis_rate: float
    vat_amount: float
    cis_amount: float
    total_amount: float
    normal_hours: float
    overtime_hours: float
    status: str
    created_at: Optional[datetime] = None
    due_date: Optional[date] = None
    pdf_url: Optional[str] = None
    notes: Optional[str] = None


class InvoiceListItem(InvoiceResponse):
    username: Optional[str] = None


class InvoiceDetailResponse(InvoiceListItem):
    timesheets: list[TimesheetListItem] = []
