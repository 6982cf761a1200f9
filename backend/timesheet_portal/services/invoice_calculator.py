"""VAT / CIS arithmetic and due dates for invoices."""

from datetime import date, datetime
from decimal import Decimal
from typing import NamedTuple, Optional, Union

from dateutil.relativedelta import relativedelta

DEFAULT_PAYMENT_FREQUENCY = "monthly"

_FREQUENCY_STEPS = {
    "weekly": relativedelta(days=7),
    "fortnightly": relativedelta(days=14),
    "monthly": relativedelta(months=1),
}


class InvoiceAmounts(NamedTuple):
    vat_amount: Decimal
    cis_amount: Decimal
    total_amount: Decimal


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def calculate(subtotal, vat_rate, cis_rate) -> InvoiceAmounts:
    """VAT is added to the subtotal; CIS is withheld from it."""
    subtotal = _dec(subtotal)
    vat_amount = subtotal * _dec(vat_rate) / Decimal(100)
    cis_amount = subtotal * _dec(cis_rate) / Decimal(100)
    return InvoiceAmounts(vat_amount, cis_amount, subtotal + vat_amount - cis_amount)


def due_date(created_at: Union[date, datetime], payment_frequency: Optional[str] = None) -> date:
    if isinstance(created_at, datetime):
        created_at = created_at.date()
    step = _FREQUENCY_STEPS.get(payment_frequency or DEFAULT_PAYMENT_FREQUENCY)
    if step is None:
        step = _FREQUENCY_STEPS[DEFAULT_PAYMENT_FREQUENCY]
    # relativedelta clamps e.g. Jan 31 + 1 month to the last day of February
    return created_at + step
