from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from riskboard.utils.dates import add_months

Q2 = Decimal("0.01")


def d2(x: Decimal) -> Decimal:
    return x.quantize(Q2, rounding=ROUND_HALF_UP)


def to_dec(v) -> Decimal:
    if isinstance(v, Decimal):
        return v
    return Decimal(str(v))


@dataclass(frozen=True)
class AmortizationSummary:
    monthly_payment: Decimal
    total_amount: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class ScheduleRow:
    period: int
    due_date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


def monthly_rate(annual_rate_percent) -> Decimal:
    return to_dec(annual_rate_percent) / Decimal("100") / Decimal("12")


def _monthly_payment(principal: Decimal, term_months: int, r: Decimal) -> Decimal:
    if r == 0:
        return principal / Decimal(term_months)
    growth = (Decimal("1") + r) ** term_months
    return principal * (r * growth) / (growth - Decimal("1"))


def calculate_amortization(principal, term_months: int, annual_rate_percent) -> AmortizationSummary:
    """Fixed monthly payment and repayment totals for a fully amortizing loan.

    Inputs must already be validated (principal > 0, term > 0, rate >= 0);
    a zero term divides by zero. Totals are taken from the unrounded payment
    and every output is rounded half-up to cents.
    """
    p = to_dec(principal)
    n = int(term_months)
    payment = _monthly_payment(p, n, monthly_rate(annual_rate_percent))
    total = payment * n
    return AmortizationSummary(
        monthly_payment=d2(payment),
        total_amount=d2(total),
        total_interest=d2(total - p),
    )


def amortization_schedule(principal, term_months: int, annual_rate_percent, start: date) -> list[ScheduleRow]:
    p = d2(to_dec(principal))
    n = int(term_months)
    r = monthly_rate(annual_rate_percent)
    payment = d2(_monthly_payment(p, n, r))

    rows: list[ScheduleRow] = []
    balance = p
    for k in range(1, n + 1):
        interest = d2(balance * r)
        if k == n:
            # last installment absorbs the accumulated rounding
            principal_part = balance
        else:
            principal_part = min(payment - interest, balance)
        balance = balance - principal_part
        rows.append(
            ScheduleRow(
                period=k,
                due_date=add_months(start, k),
                payment=principal_part + interest,
                principal=principal_part,
                interest=interest,
                balance=balance,
            )
        )
    return rows
