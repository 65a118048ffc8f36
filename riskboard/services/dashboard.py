from __future__ import annotations

import logging
import time
from datetime import date, datetime, time as dtime, timezone

from sqlalchemy import case, extract, func, select
from sqlalchemy.orm import Session

from riskboard.models.application import Application
from riskboard.models.credit_history import CreditHistory
from riskboard.services.amortization import d2, to_dec
from riskboard.services.risk_policy import INCOME_BRACKETS, OVERDUE_BUCKETS
from riskboard.utils.dates import add_months, month_key, month_start

logger = logging.getLogger(__name__)

TREND_MONTHS = 12

SECTIONS = (
    "summary",
    "loan_distribution",
    "default_risk",
    "credit_trends",
    "demographics",
    "payment_behavior",
)


def _money(v) -> float:
    if v is None:
        return 0.0
    return float(d2(to_dec(v)))


def _pct(part, whole) -> float:
    if not whole:
        return 0.0
    return float(d2(to_dec(part) * 100 / to_dec(whole)))


def _bracket_case(col, brackets):
    whens = [(col <= bound, label) for bound, label in brackets if bound is not None]
    return case(*whens, else_=brackets[-1][1])


def summary(s: Session) -> dict:
    total, credit_sum, credit_avg, defaulted = s.execute(
        select(
            func.count(Application.sk_id_curr),
            func.sum(Application.credit_amount),
            func.avg(Application.credit_amount),
            func.sum(func.coalesce(Application.target, 0)),
        )
    ).one()
    total = int(total or 0)
    defaulted = int(defaulted or 0)
    return {
        "total_applications": total,
        "total_credit_amount": _money(credit_sum),
        "avg_credit_amount": _money(credit_avg),
        "defaulted": defaulted,
        "default_rate": _pct(defaulted, total),
    }


def loan_distribution(s: Session) -> list[dict]:
    # Grouping happens on a subquery column so the expression is rendered once.
    inner = (
        select(
            func.coalesce(Application.contract_type, "Unknown").label("contract_type"),
            Application.credit_amount.label("amount"),
        )
        .where(Application.credit_amount > 0)
        .subquery()
    )
    n = func.count()
    rows = s.execute(
        select(inner.c.contract_type, n, func.avg(inner.c.amount))
        .group_by(inner.c.contract_type)
        .order_by(n.desc(), inner.c.contract_type.asc())
    ).all()

    total = sum(int(r[1]) for r in rows)
    return [
        {
            "contract_type": ct,
            "count": int(cnt),
            "percentage": _pct(cnt, total),
            "avg_amount": _money(avg_amt),
        }
        for ct, cnt, avg_amt in rows
    ]


def default_risk(s: Session) -> list[dict]:
    inner = (
        select(
            _bracket_case(Application.income_total, INCOME_BRACKETS).label("risk_category"),
            func.coalesce(Application.target, 0).label("target"),
            func.coalesce(Application.credit_amount, 0).label("amount"),
        )
        .where(Application.income_total > 0)
        .subquery()
    )
    n = func.count()
    rows = s.execute(
        select(inner.c.risk_category, n, func.sum(inner.c.target), func.avg(inner.c.amount))
        .group_by(inner.c.risk_category)
        .order_by(n.desc(), inner.c.risk_category.asc())
    ).all()

    return [
        {
            "risk_category": cat,
            "total_applications": int(cnt),
            "defaulted": int(dflt or 0),
            "default_rate": _pct(dflt or 0, cnt),
            "avg_credit_amount": _money(avg_amt),
        }
        for cat, cnt, dflt, avg_amt in rows
    ]


def credit_trends(s: Session, today: date, months: int = TREND_MONTHS) -> list[dict]:
    """Monthly application volume for the trailing ``months`` calendar months.

    The current month is the last entry; months without applications are
    reported with zeros so the series always has ``months`` points.
    """
    first = add_months(month_start(today), -(months - 1))
    after_last = add_months(month_start(today), 1)

    inner = (
        select(
            extract("year", Application.created_at).label("y"),
            extract("month", Application.created_at).label("m"),
            Application.credit_amount.label("amount"),
        )
        .where(
            Application.created_at >= datetime.combine(first, dtime.min),
            Application.created_at < datetime.combine(after_last, dtime.min),
            Application.credit_amount > 0,
        )
        .subquery()
    )
    rows = s.execute(
        select(inner.c.y, inner.c.m, func.count(), func.avg(inner.c.amount), func.sum(inner.c.amount))
        .group_by(inner.c.y, inner.c.m)
    ).all()

    by_month = {f"{int(y):04d}-{int(m):02d}": (cnt, avg_amt, total) for y, m, cnt, avg_amt, total in rows}

    out: list[dict] = []
    for i in range(months):
        key = month_key(add_months(first, i))
        cnt, avg_amt, total = by_month.get(key, (0, None, None))
        out.append(
            {
                "month": key,
                "total_applications": int(cnt),
                "avg_credit_amount": _money(avg_amt),
                "total_credit_amount": _money(total),
            }
        )
    return out


def _demographic_group(s: Session, category: str, label_expr, min_group_size: int) -> list[dict]:
    inner = select(
        label_expr.label("subcategory"),
        func.coalesce(Application.income_total, 0).label("income"),
        func.coalesce(Application.target, 0).label("target"),
    ).subquery()
    n = func.count()
    rows = s.execute(
        select(inner.c.subcategory, n, func.avg(inner.c.income), func.sum(inner.c.target))
        .group_by(inner.c.subcategory)
        .having(n > min_group_size)
    ).all()
    return [
        {
            "category": category,
            "subcategory": sub,
            "count": int(cnt),
            "avg_income": _money(avg_income),
            "default_rate": _pct(dflt or 0, cnt),
        }
        for sub, cnt, avg_income, dflt in rows
    ]


def demographics(s: Session, min_group_size: int = 10) -> list[dict]:
    gender = func.coalesce(Application.gender, "Unknown")
    car = case(
        (Application.own_car == 1, "Owns Car"),
        (Application.own_car == 0, "No Car"),
        else_="Unknown",
    )
    out = _demographic_group(s, "Gender", gender, min_group_size)
    out += _demographic_group(s, "Car Ownership", car, min_group_size)
    out.sort(key=lambda r: (r["category"], -r["count"], r["subcategory"]))
    return out


def payment_behavior(s: Session) -> list[dict]:
    overdue = func.coalesce(CreditHistory.credit_day_overdue, 0)

    label_whens = []
    order_whens = []
    for i, (bound, label) in enumerate(OVERDUE_BUCKETS[:-1], start=1):
        label_whens.append((overdue <= bound, label))
        order_whens.append((overdue <= bound, i))

    inner = select(
        case(*label_whens, else_=OVERDUE_BUCKETS[-1][1]).label("payment_status"),
        case(*order_whens, else_=len(OVERDUE_BUCKETS)).label("status_order"),
        overdue.label("overdue"),
        func.coalesce(CreditHistory.credit_sum_debt, 0).label("debt"),
    ).subquery()

    rows = s.execute(
        select(
            inner.c.payment_status,
            inner.c.status_order,
            func.count(),
            func.avg(inner.c.overdue),
            func.sum(inner.c.debt),
        )
        .group_by(inner.c.payment_status, inner.c.status_order)
        .order_by(inner.c.status_order.asc())
    ).all()

    return [
        {
            "payment_status": status,
            "count": int(cnt),
            "avg_days_overdue": _money(avg_overdue),
            "total_debt_amount": _money(debt),
        }
        for status, _order, cnt, avg_overdue, debt in rows
    ]


def build_section(s: Session, name: str, today: date, min_group_size: int = 10):
    if name == "summary":
        return summary(s)
    if name == "loan_distribution":
        return loan_distribution(s)
    if name == "default_risk":
        return default_risk(s)
    if name == "credit_trends":
        return credit_trends(s, today)
    if name == "demographics":
        return demographics(s, min_group_size)
    if name == "payment_behavior":
        return payment_behavior(s)
    raise KeyError(name)


def build_dashboard(s: Session, today: date, min_group_size: int = 10) -> dict:
    started = time.perf_counter()
    out = {name: build_section(s, name, today, min_group_size) for name in SECTIONS}
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    logger.info(
        "dashboard built in %s ms (%s applications, %s payment buckets)",
        elapsed_ms,
        out["summary"]["total_applications"],
        len(out["payment_behavior"]),
    )
    out["metadata"] = {
        "execution_time_ms": elapsed_ms,
        "generated_at": datetime.now(timezone.utc),
    }
    return out
