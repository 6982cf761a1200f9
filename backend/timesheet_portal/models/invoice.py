from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Numeric, ForeignKey
from sqlalchemy.sql import func

from timesheet_portal.database import Base


INVOICE_STATUSES = ("pending", "paid", "overdue")


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference_number = Column(String(50), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subtotal = Column(Numeric(10, 2), nullable=False)
    vat_rate = Column(Numeric(5, 2), nullable=False)
    cis_rate = Column(Numeric(5, 2), nullable=False)
    vat_amount = Column(Numeric(10, 2), nullable=False, default=0)
    cis_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    normal_hours = Column(Numeric(10, 2), nullable=False)
    overtime_hours = Column(Numeric(10, 2), nullable=False)
    normal_rate = Column(Numeric(10, 2), nullable=True)
    overtime_rate = Column(Numeric(10, 2), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    due_date = Column(Date, nullable=True)
    pdf_url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)


class InvoiceTimesheet(Base):
    __tablename__ = "invoice_timesheets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    # unique: a timesheet is consumed by at most one invoice
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, unique=True)
