from datetime import date, timedelta
from io import BytesIO

import pytest
from openpyxl import load_workbook

from riskboard.api.deps import today
from riskboard.main import app
from riskboard.models.payment import Payment
from riskboard.utils.dates import add_months

AS_OF = date(2024, 6, 15)


@pytest.fixture()
def fixed_today():
    app.dependency_overrides[today] = lambda: AS_OF
    yield AS_OF
    app.dependency_overrides.pop(today, None)


def _client(client, headers, score=720, n=1):
    r = client.post(
        "/clients",
        json={
            "first_name": "Luis",
            "last_name": "Pérez",
            "identification": f"CC-5000000{n}",
            "email": f"luis{n}@example.com",
            "phone": "3001234567",
            "address": "Carrera 7 # 45-10, Medellín",
            "date_of_birth": "1985-01-20",
            "credit_score": score,
        },
        headers=headers,
    )
    assert r.status_code == 201
    return r.json()["data"]["id"]


def _loan(client, headers, client_id, **kw):
    body = {"client_id": client_id, "amount": 10000, "term_months": 12, "interest_rate": 12, "loan_type": "PERSONAL"}
    body.update(kw)
    return client.post("/loans", json=body, headers=headers)


def test_quote(client, user_headers):
    r = client.post("/loans/quote", json={"amount": 100000, "term_months": 360, "interest_rate": 6}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["data"]["monthly_payment"] == 599.55


def test_create_loan_is_approved_with_due_date(client, user_headers, fixed_today):
    cid = _client(client, user_headers)
    r = _loan(client, user_headers, cid)
    assert r.status_code == 201

    data = r.json()["data"]
    assert data["status"] == "APPROVED"
    assert data["approved_at"] is not None
    approved = date.fromisoformat(data["approved_at"][:10])
    assert data["due_date"] == add_months(approved, 12).isoformat()

    assert data["monthly_payment"] == 888.49
    assert data["client"]["id"] == cid
    assert data["payments"] == []
    assert data["total_paid"] == 0
    assert data["remaining_balance"] == 10000
    assert data["payment_status"] == "current"
    assert data["progress_percent"] == 0


def test_create_loan_for_missing_client(client, user_headers):
    r = _loan(client, user_headers, 404)
    assert r.status_code == 404
    assert r.json()["error"] == "client_not_found"


def test_low_score_is_ineligible(client, user_headers):
    cid = _client(client, user_headers, score=550)
    r = _loan(client, user_headers, cid)
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "ineligible_client"
    assert body["details"] == {"credit_score": 550, "minimum": 600}


def test_amount_over_tier_is_refused(client, user_headers):
    cid = _client(client, user_headers, score=650)
    r = _loan(client, user_headers, cid, amount=150000)
    assert r.status_code == 400
    assert r.json()["error"] == "amount_exceeds_limit"
    assert r.json()["details"]["limit"] == 100000


@pytest.mark.parametrize(
    "field,value",
    [("amount", 999), ("amount", 1000001), ("term_months", 5), ("term_months", 361), ("interest_rate", 0), ("loan_type", "YACHT")],
)
def test_loan_input_bounds(client, user_headers, field, value):
    cid = _client(client, user_headers)
    r = _loan(client, user_headers, cid, **{field: value})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


def test_list_loans_filters(client, user_headers):
    a = _client(client, user_headers, n=1)
    b = _client(client, user_headers, n=2)
    _loan(client, user_headers, a)
    _loan(client, user_headers, a, loan_type="AUTO")
    _loan(client, user_headers, b, loan_type="AUTO")

    r = client.get("/loans", params={"client_id": a}, headers=user_headers)
    assert r.json()["pagination"]["total"] == 2

    r = client.get("/loans", params={"loan_type": "AUTO"}, headers=user_headers)
    assert {ln["client_id"] for ln in r.json()["data"]} == {a, b}

    r = client.get("/loans", params={"status": "REJECTED"}, headers=user_headers)
    assert r.json()["data"] == []


def test_status_transitions(client, user_headers):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]

    r = client.put(f"/loans/{lid}", json={"status": "ACTIVE"}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "ACTIVE"

    r = client.put(f"/loans/{lid}", json={"status": "COMPLETED"}, headers=user_headers)
    assert r.status_code == 200

    r = client.put(f"/loans/{lid}", json={"status": "ACTIVE"}, headers=user_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_status_transition"
    assert r.json()["details"] == {"entity": "loan", "from": "COMPLETED", "to": "ACTIVE"}


def test_changing_term_moves_due_date(client, user_headers):
    cid = _client(client, user_headers)
    data = _loan(client, user_headers, cid).json()["data"]
    approved = date.fromisoformat(data["approved_at"][:10])

    r = client.put(f"/loans/{data['id']}", json={"term_months": 24}, headers=user_headers)
    assert r.status_code == 200
    assert r.json()["data"]["due_date"] == add_months(approved, 24).isoformat()
    assert r.json()["data"]["monthly_payment"] == 470.73


def test_payments_drive_loan_progress(client, user_headers, fixed_today):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]

    paid = client.post(
        f"/loans/{lid}/payments",
        json={"amount": 2500, "payment_date": "2024-05-01", "status": "COMPLETED", "payment_method": "CASH"},
        headers=user_headers,
    )
    assert paid.status_code == 201
    assert paid.json()["data"]["client_id"] == cid

    due = (AS_OF - timedelta(days=10)).isoformat()
    pending = client.post(f"/loans/{lid}/payments", json={"amount": 900, "payment_date": due}, headers=user_headers)
    assert pending.status_code == 201
    assert pending.json()["data"]["status"] == "PENDING"
    assert pending.json()["data"]["payment_method"] == "BANK_TRANSFER"

    data = client.get(f"/loans/{lid}", headers=user_headers).json()["data"]
    assert data["total_paid"] == 2500
    assert data["remaining_balance"] == 7500
    assert data["progress_percent"] == 25
    assert data["next_payment_due"] == due
    assert data["days_overdue"] == 10
    assert data["payment_status"] == "late"
    assert len(data["payments"]) == 2

    pid = pending.json()["data"]["id"]
    r = client.put(f"/payments/{pid}", json={"status": "COMPLETED"}, headers=user_headers)
    assert r.status_code == 200

    data = client.get(f"/loans/{lid}", headers=user_headers).json()["data"]
    assert data["total_paid"] == 3400
    assert data["payment_status"] == "current"
    assert data["next_payment_due"] is None

    r = client.put(f"/payments/{pid}", json={"status": "PENDING"}, headers=user_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_status_transition"


def test_payment_routes_for_missing_rows(client, user_headers):
    assert client.get("/loans/77/payments", headers=user_headers).status_code == 404
    r = client.post("/loans/77/payments", json={"amount": 10, "payment_date": "2024-01-01"}, headers=user_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "loan_not_found"
    assert client.delete("/payments/77", headers=user_headers).json()["error"] == "payment_not_found"


def test_delete_loan_removes_its_payments(client, user_headers):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]
    pid = client.post(
        f"/loans/{lid}/payments", json={"amount": 100, "payment_date": "2024-01-01"}, headers=user_headers
    ).json()["data"]["id"]

    assert client.delete(f"/loans/{lid}", headers=user_headers).status_code == 200
    assert client.get(f"/loans/{lid}", headers=user_headers).status_code == 404
    assert client.delete(f"/payments/{pid}", headers=user_headers).status_code == 404

    # the client can go once its loans are gone
    assert client.delete(f"/clients/{cid}", headers=user_headers).status_code == 200


def test_schedule(client, user_headers):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]

    rows = client.get(f"/loans/{lid}/schedule", headers=user_headers).json()["data"]
    assert len(rows) == 12
    assert rows[0]["payment"] == 888.49
    assert rows[-1]["balance"] == 0
    assert round(sum(r["principal"] for r in rows), 2) == 10000


def test_schedule_export(client, user_headers, fixed_today):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]
    client.post(
        f"/loans/{lid}/payments",
        json={"amount": 888.49, "payment_date": "2024-06-01", "status": "COMPLETED"},
        headers=user_headers,
    )

    r = client.get(f"/loans/{lid}/schedule.xlsx", headers=user_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert f"loan_{lid}_schedule_2024-06-15.xlsx" in r.headers["content-disposition"]

    wb = load_workbook(BytesIO(r.content))
    assert wb.sheetnames == ["Schedule", "Payments", "Summary"]

    ws = wb["Schedule"]
    assert ws["A1"].value == "Client"
    assert ws["B1"].value == "Luis Pérez"
    assert [c.value for c in ws[4]] == ["Period", "Due Date", "Payment", "Principal", "Interest", "Balance"]
    assert ws["A5"].value == 1
    assert ws["C5"].value == 888.49
    assert ws["A17"].value == "Totals"

    pay = wb["Payments"]
    assert pay["B2"].value == 888.49
    assert pay["D2"].value == "COMPLETED"

    summary = {row[0].value: row[1].value for row in wb["Summary"].iter_rows(min_row=3) if row[0].value}
    assert summary["Monthly Payment"] == 888.49
    assert summary["Total Paid"] == 888.49
    assert summary["Next Payment Due"] == "No pending payments"


def test_reassigning_loan_moves_its_payments(client, user_headers):
    a = _client(client, user_headers, n=1)
    b = _client(client, user_headers, n=2)
    lid = _loan(client, user_headers, a).json()["data"]["id"]
    client.post(f"/loans/{lid}/payments", json={"amount": 250, "payment_date": "2024-01-01"}, headers=user_headers)

    r = client.put(f"/loans/{lid}", json={"client_id": b}, headers=user_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["client_id"] == b
    assert data["client"]["id"] == b
    assert [p["client_id"] for p in data["payments"]] == [b]

    # the old client has nothing left and can go; the new one is still guarded
    assert client.delete(f"/clients/{a}", headers=user_headers).status_code == 200
    r = client.delete(f"/clients/{b}", headers=user_headers)
    assert r.status_code == 409
    assert r.json()["error"] == "client_has_loans"


def test_client_with_stray_payments_is_not_deleted(client, user_headers, api_session):
    a = _client(client, user_headers, n=1)
    b = _client(client, user_headers, n=2)
    lid = _loan(client, user_headers, b).json()["data"]["id"]
    api_session.add(Payment(loan_id=lid, client_id=a, amount=100, payment_date=date(2024, 1, 1)))
    api_session.commit()

    r = client.delete(f"/clients/{a}", headers=user_headers)
    assert r.status_code == 409
    assert r.json()["success"] is False
    assert r.json()["error"] == "client_has_payments"


@pytest.mark.parametrize("amount", [0, -5])
def test_payment_amount_must_be_positive(client, user_headers, amount):
    cid = _client(client, user_headers)
    lid = _loan(client, user_headers, cid).json()["data"]["id"]

    r = client.post(
        f"/loans/{lid}/payments",
        json={"amount": amount, "payment_date": "2024-01-01", "status": "COMPLETED"},
        headers=user_headers,
    )
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "amount"

    pid = client.post(
        f"/loans/{lid}/payments", json={"amount": 10, "payment_date": "2024-01-01"}, headers=user_headers
    ).json()["data"]["id"]
    r = client.put(f"/payments/{pid}", json={"amount": amount}, headers=user_headers)
    assert r.status_code == 400
