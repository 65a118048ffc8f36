from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from riskboard.db.base import Base
from riskboard.db import registry  # noqa: F401
from riskboard.models.application import Application
from riskboard.models.credit_history import CreditHistory
from riskboard.services.dashboard import (
    SECTIONS,
    build_dashboard,
    build_section,
    credit_trends,
    default_risk,
    demographics,
    loan_distribution,
    payment_behavior,
    summary,
)

TODAY = date(2024, 6, 15)


@pytest.fixture(scope="session")
def engine():
    eng = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    connection = engine.connect()
    trans = connection.begin()
    Session = sessionmaker(bind=connection, autoflush=False, autocommit=False, future=True)
    s = Session()
    try:
        yield s
    finally:
        s.close()
        trans.rollback()
        connection.close()


_next_id = iter(range(100000, 200000))


def _app(session, **kw):
    kw.setdefault("created_at", datetime(2024, 6, 1, 12, 0))
    a = Application(sk_id_curr=next(_next_id), **kw)
    session.add(a)
    return a


def _history(session, **kw):
    h = CreditHistory(sk_id_bureau=next(_next_id), **kw)
    session.add(h)
    return h


def test_empty_database(session):
    assert summary(session) == {
        "total_applications": 0,
        "total_credit_amount": 0.0,
        "avg_credit_amount": 0.0,
        "defaulted": 0,
        "default_rate": 0.0,
    }
    assert loan_distribution(session) == []
    assert default_risk(session) == []
    assert demographics(session) == []
    assert payment_behavior(session) == []

    trends = credit_trends(session, TODAY)
    assert len(trends) == 12
    assert all(t["total_applications"] == 0 for t in trends)


def test_summary(session):
    _app(session, target=1, credit_amount=1000)
    _app(session, target=0, credit_amount=3000)
    _app(session, target=None, credit_amount=None)
    session.flush()

    out = summary(session)
    assert out["total_applications"] == 3
    assert out["total_credit_amount"] == 4000.0
    assert out["avg_credit_amount"] == 2000.0
    assert out["defaulted"] == 1
    assert out["default_rate"] == 33.33


def test_loan_distribution_ignores_missing_amounts(session):
    _app(session, contract_type="Cash loans", credit_amount=1000)
    _app(session, contract_type="Cash loans", credit_amount=3000)
    _app(session, contract_type="Revolving loans", credit_amount=500)
    _app(session, contract_type="Revolving loans", credit_amount=None)
    _app(session, contract_type=None, credit_amount=800)
    session.flush()

    out = loan_distribution(session)
    assert [r["contract_type"] for r in out] == ["Cash loans", "Revolving loans", "Unknown"]
    cash = out[0]
    assert cash["count"] == 2
    assert cash["percentage"] == 50.0
    assert cash["avg_amount"] == 2000.0
    assert sum(r["count"] for r in out) == 4


def test_default_risk_by_income_bracket(session):
    _app(session, income_total=50000, target=0, credit_amount=1000)
    _app(session, income_total=200000, target=1, credit_amount=2000)
    _app(session, income_total=250000, target=0, credit_amount=4000)
    _app(session, income_total=900000, target=0, credit_amount=9000)
    _app(session, income_total=0, target=1, credit_amount=100)
    session.flush()

    out = default_risk(session)
    by_cat = {r["risk_category"]: r for r in out}
    assert out[0]["risk_category"] == "Medium Income"
    assert by_cat["Medium Income"]["total_applications"] == 2
    assert by_cat["Medium Income"]["defaulted"] == 1
    assert by_cat["Medium Income"]["default_rate"] == 50.0
    assert by_cat["Medium Income"]["avg_credit_amount"] == 3000.0
    assert by_cat["Low Income"]["total_applications"] == 1
    assert by_cat["Very High Income"]["total_applications"] == 1
    assert "High Income" not in by_cat


def test_credit_trends_cover_trailing_months(session):
    _app(session, credit_amount=1000, created_at=datetime(2024, 6, 1, 9, 30))
    _app(session, credit_amount=3000, created_at=datetime(2024, 6, 14, 18, 0))
    _app(session, credit_amount=500, created_at=datetime(2024, 4, 3, 8, 0))
    _app(session, credit_amount=700, created_at=datetime(2023, 7, 1, 0, 0))
    # outside the window
    _app(session, credit_amount=9999, created_at=datetime(2023, 6, 30, 23, 59))
    _app(session, credit_amount=9999, created_at=datetime(2024, 7, 1, 0, 0))
    session.flush()

    out = credit_trends(session, TODAY)
    assert len(out) == 12
    assert out[0]["month"] == "2023-07"
    assert out[-1]["month"] == "2024-06"

    by_month = {r["month"]: r for r in out}
    assert by_month["2024-06"]["total_applications"] == 2
    assert by_month["2024-06"]["avg_credit_amount"] == 2000.0
    assert by_month["2024-06"]["total_credit_amount"] == 4000.0
    assert by_month["2024-04"]["total_applications"] == 1
    assert by_month["2023-07"]["total_applications"] == 1
    assert by_month["2024-05"] == {
        "month": "2024-05",
        "total_applications": 0,
        "avg_credit_amount": 0.0,
        "total_credit_amount": 0.0,
    }
    assert sum(r["total_applications"] for r in out) == 4


def test_demographics_hide_small_groups(session):
    for _ in range(3):
        _app(session, gender="M", own_car=1, income_total=100000, target=0)
    _app(session, gender="F", own_car=0, income_total=50000, target=1)
    _app(session, gender="F", own_car=0, income_total=70000, target=0)
    session.flush()

    out = demographics(session, min_group_size=2)
    assert [(r["category"], r["subcategory"]) for r in out] == [
        ("Car Ownership", "Owns Car"),
        ("Gender", "M"),
    ]
    assert out[1]["count"] == 3
    assert out[1]["avg_income"] == 100000.0
    assert out[1]["default_rate"] == 0.0

    out = demographics(session, min_group_size=1)
    genders = [r for r in out if r["category"] == "Gender"]
    assert [g["subcategory"] for g in genders] == ["M", "F"]
    assert genders[1]["default_rate"] == 50.0
    assert genders[1]["avg_income"] == 60000.0


def test_payment_behavior_buckets(session):
    for overdue, debt in [(0, 100), (None, 200), (0, None), (15, 1000), (45, 2000), (120, 3000), (200, 4000), (90, 500)]:
        _history(session, credit_day_overdue=overdue, credit_sum_debt=debt)
    session.flush()

    out = payment_behavior(session)
    assert [r["payment_status"] for r in out] == [
        "On Time",
        "1-30 Days Late",
        "31-90 Days Late",
        "91-180 Days Late",
        "Over 180 Days Late",
    ]
    on_time = out[0]
    assert on_time["count"] == 3
    assert on_time["avg_days_overdue"] == 0.0
    assert on_time["total_debt_amount"] == 300.0

    late = out[2]
    assert late["count"] == 2
    assert late["avg_days_overdue"] == 67.5
    assert late["total_debt_amount"] == 2500.0


def test_build_dashboard_has_every_section(session):
    _app(session, target=0, credit_amount=1000, contract_type="Cash loans", income_total=120000)
    _history(session, credit_day_overdue=0, credit_sum_debt=10)
    session.flush()

    out = build_dashboard(session, TODAY, min_group_size=0)
    for name in SECTIONS:
        assert name in out
    assert out["summary"]["total_applications"] == 1
    assert out["metadata"]["execution_time_ms"] >= 0
    assert isinstance(out["metadata"]["generated_at"], datetime)


def test_unknown_section(session):
    with pytest.raises(KeyError):
        build_section(session, "nope", TODAY)
