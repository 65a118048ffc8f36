from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

import pytest

from riskboard.models.enums import PaymentHealth
from riskboard.services.loan_progress import classify_overdue, derive_loan_progress


@dataclass
class P:
    amount: object
    status: str
    payment_date: date


TODAY = date(2024, 6, 15)


def test_no_payments():
    out = derive_loan_progress(10000, [], TODAY)
    assert out.total_paid == Decimal("0.00")
    assert out.remaining_balance == Decimal("10000.00")
    assert out.next_payment_due is None
    assert out.payment_status == PaymentHealth.CURRENT
    assert out.days_overdue == 0
    assert out.progress_percent == Decimal("0.00")


def test_only_completed_payments_count():
    payments = [
        P(Decimal("2500"), "COMPLETED", date(2024, 1, 1)),
        P(Decimal("2500"), "COMPLETED", date(2024, 2, 1)),
        P(Decimal("2500"), "FAILED", date(2024, 3, 1)),
        P(Decimal("2500"), "CANCELLED", date(2024, 4, 1)),
    ]
    out = derive_loan_progress(Decimal("10000"), payments, TODAY)
    assert out.total_paid == Decimal("5000.00")
    assert out.remaining_balance == Decimal("5000.00")
    assert out.progress_percent == Decimal("50.00")
    assert out.next_payment_due is None


def test_earliest_pending_payment_is_next_due():
    payments = [
        P(100, "PENDING", date(2024, 8, 1)),
        P(100, "PENDING", date(2024, 7, 1)),
        P(100, "COMPLETED", date(2024, 6, 1)),
    ]
    out = derive_loan_progress(1000, payments, TODAY)
    assert out.next_payment_due == date(2024, 7, 1)
    assert out.days_overdue == 0
    assert out.payment_status == PaymentHealth.CURRENT


def test_pending_due_today_is_not_overdue():
    out = derive_loan_progress(1000, [P(100, "PENDING", TODAY)], TODAY)
    assert out.days_overdue == 0
    assert out.payment_status == PaymentHealth.CURRENT


def test_overdue_pending_payment_is_late():
    out = derive_loan_progress(1000, [P(100, "PENDING", date(2024, 6, 5))], TODAY)
    assert out.days_overdue == 10
    assert out.payment_status == PaymentHealth.LATE


def test_long_overdue_payment_defaults_the_loan():
    out = derive_loan_progress(1000, [P(100, "PENDING", date(2024, 1, 1))], TODAY)
    assert out.days_overdue == (TODAY - date(2024, 1, 1)).days
    assert out.payment_status == PaymentHealth.DEFAULTED


def test_overpayment_goes_negative():
    out = derive_loan_progress(1000, [P(1200, "COMPLETED", date(2024, 1, 1))], TODAY)
    assert out.remaining_balance == Decimal("-200.00")
    assert out.progress_percent == Decimal("120.00")


@pytest.mark.parametrize(
    "days,expected",
    [
        (0, PaymentHealth.CURRENT),
        (1, PaymentHealth.LATE),
        (30, PaymentHealth.LATE),
        (90, PaymentHealth.LATE),
        (91, PaymentHealth.DEFAULTED),
        (400, PaymentHealth.DEFAULTED),
    ],
)
def test_classify_overdue_boundaries(days, expected):
    assert classify_overdue(days) == expected


def test_remaining_balance_after_completed_payments():
    payments = [P(amt, "COMPLETED", date(2024, m, 1)) for m, amt in enumerate([1500, 1500, 1775], start=1)]
    out = derive_loan_progress(50000, payments, TODAY)
    assert out.total_paid == Decimal("4775.00")
    assert out.remaining_balance == Decimal("45225.00")
    assert out.progress_percent == Decimal("9.55")


@pytest.mark.parametrize(
    "due_offset,expected",
    [
        (95, PaymentHealth.DEFAULTED),
        (45, PaymentHealth.LATE),
        (-10, PaymentHealth.CURRENT),
    ],
)
def test_status_from_days_past_due(due_offset, expected):
    out = derive_loan_progress(1000, [P(100, "PENDING", TODAY - timedelta(days=due_offset))], TODAY)
    assert out.payment_status == expected
    assert out.days_overdue == max(due_offset, 0)


def test_recomputing_is_stable():
    payments = [P(300, "COMPLETED", date(2024, 1, 1)), P(300, "PENDING", date(2024, 5, 1))]
    assert derive_loan_progress(5000, payments, TODAY) == derive_loan_progress(5000, payments, TODAY)
