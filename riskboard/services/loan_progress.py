from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from riskboard.models.enums import PaymentHealth, PaymentStatus
from riskboard.services.amortization import d2, to_dec
from riskboard.services.risk_policy import DEFAULT_AFTER_DAYS


class PaymentLike(Protocol):
    amount: object
    status: str
    payment_date: date


@dataclass(frozen=True)
class LoanProgress:
    total_paid: Decimal
    remaining_balance: Decimal
    next_payment_due: date | None
    payment_status: PaymentHealth
    days_overdue: int
    progress_percent: Decimal


def classify_overdue(days_overdue: int) -> PaymentHealth:
    if days_overdue <= 0:
        return PaymentHealth.CURRENT
    if days_overdue <= DEFAULT_AFTER_DAYS:
        return PaymentHealth.LATE
    return PaymentHealth.DEFAULTED


def derive_loan_progress(amount, payments: Iterable[PaymentLike], today: date) -> LoanProgress:
    """Repayment figures for one loan, computed from its raw payment rows.

    Only COMPLETED payments count towards ``total_paid``. The earliest PENDING
    payment is the next one due and decides how late the loan is.
    """
    principal = to_dec(amount)
    payments = list(payments)

    total_paid = sum(
        (to_dec(p.amount) for p in payments if p.status == PaymentStatus.COMPLETED),
        Decimal("0"),
    )
    remaining = principal - total_paid

    pending = sorted(
        (p for p in payments if p.status == PaymentStatus.PENDING),
        key=lambda p: p.payment_date,
    )
    next_due = pending[0].payment_date if pending else None

    days_overdue = 0
    if next_due is not None and today > next_due:
        days_overdue = (today - next_due).days

    if principal > 0:
        progress = d2((principal - remaining) / principal * Decimal("100"))
    else:
        progress = Decimal("0.00")

    return LoanProgress(
        total_paid=d2(total_paid),
        remaining_balance=d2(remaining),
        next_payment_due=next_due,
        payment_status=classify_overdue(days_overdue),
        days_overdue=days_overdue,
        progress_percent=progress,
    )
