from datetime import date, datetime, timezone
from io import BytesIO

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from riskboard.api.deps import Paging, clients_repo, current_user, loans_repo, today
from riskboard.core.errors import BadRequest, NotFound
from riskboard.models.enums import LoanStatus, LoanType
from riskboard.models.loan import Loan
from riskboard.repositories.clients import ClientRepository
from riskboard.repositories.loans import LoanRepository
from riskboard.schemas.common import ApiResponse, PageMeta, ok
from riskboard.schemas.loan import (
    LoanCreate,
    LoanDetailOut,
    LoanOut,
    LoanQuoteIn,
    LoanQuoteOut,
    LoanUpdate,
    ScheduleRowOut,
)
from riskboard.services.amortization import amortization_schedule, calculate_amortization
from riskboard.services.audit import log_event
from riskboard.services.eligibility import check_eligibility
from riskboard.services.lifecycle import check_loan_transition
from riskboard.services.loan_progress import derive_loan_progress
from riskboard.services.reports import build_schedule_report
from riskboard.utils.dates import add_months

router = APIRouter(prefix="/loans", tags=["loans"])


def _require_loan(loans: LoanRepository, loan_id: int, with_details: bool = False) -> Loan:
    ln = loans.get(loan_id, with_details=with_details)
    if ln is None:
        raise NotFound("Loan not found", code="loan_not_found")
    return ln


def _require_client(clients: ClientRepository, client_id: int):
    c = clients.get(client_id)
    if c is None:
        raise NotFound("Client not found", code="client_not_found")
    return c


def _stamp_approval(ln: Loan, now: datetime) -> None:
    if ln.approved_at is None:
        ln.approved_at = now
    if ln.due_date is None:
        ln.due_date = add_months(ln.approved_at.date(), ln.term_months)


def _detail(ln: Loan, as_of: date) -> dict:
    figures = calculate_amortization(ln.amount, ln.term_months, ln.interest_rate)
    progress = derive_loan_progress(ln.amount, ln.payments, as_of)

    out = LoanOut.model_validate(ln).model_dump()
    out.update(
        client=ln.client,
        payments=ln.payments,
        monthly_payment=float(figures.monthly_payment),
        total_amount=float(figures.total_amount),
        total_interest=float(figures.total_interest),
        total_paid=float(progress.total_paid),
        remaining_balance=float(progress.remaining_balance),
        next_payment_due=progress.next_payment_due,
        payment_status=progress.payment_status.value,
        days_overdue=progress.days_overdue,
        progress_percent=float(progress.progress_percent),
    )
    return out


@router.get("", response_model=ApiResponse[list[LoanOut]])
def list_loans(
    paging: Paging = Depends(),
    client_id: int | None = Query(default=None),
    status: LoanStatus | None = Query(default=None),
    loan_type: LoanType | None = Query(default=None),
    loans: LoanRepository = Depends(loans_repo),
    u=Depends(current_user),
):
    rows, total = loans.list_page(
        paging.page,
        paging.limit,
        client_id=client_id,
        status=status.value if status else None,
        loan_type=loan_type.value if loan_type else None,
    )
    return ok(rows, pagination=PageMeta.build(paging.page, paging.limit, total))


@router.post("/quote", response_model=ApiResponse[LoanQuoteOut])
def quote_loan(body: LoanQuoteIn, u=Depends(current_user)):
    figures = calculate_amortization(body.amount, body.term_months, body.interest_rate)
    return ok(
        {
            "monthly_payment": float(figures.monthly_payment),
            "total_amount": float(figures.total_amount),
            "total_interest": float(figures.total_interest),
        }
    )


@router.get("/{loan_id}", response_model=ApiResponse[LoanDetailOut])
def get_loan(
    loan_id: int,
    loans: LoanRepository = Depends(loans_repo),
    as_of: date = Depends(today),
    u=Depends(current_user),
):
    return ok(_detail(_require_loan(loans, loan_id, with_details=True), as_of))


@router.post("", response_model=ApiResponse[LoanDetailOut], status_code=201)
def create_loan(
    body: LoanCreate,
    loans: LoanRepository = Depends(loans_repo),
    clients: ClientRepository = Depends(clients_repo),
    as_of: date = Depends(today),
    u=Depends(current_user),
):
    client = _require_client(clients, body.client_id)
    check_eligibility(client.credit_score, body.amount)

    ln = Loan(
        client_id=client.id,
        amount=body.amount,
        term_months=body.term_months,
        interest_rate=body.interest_rate,
        loan_type=body.loan_type.value,
        status=LoanStatus.APPROVED.value,
    )
    _stamp_approval(ln, datetime.now(timezone.utc).replace(tzinfo=None))
    ln = loans.add(ln)

    log_event(
        loans.s,
        username=u.get("sub"),
        action="loan.create",
        entity_type="loan",
        entity_id=ln.id,
        details={
            "client_id": ln.client_id,
            "amount": str(ln.amount),
            "term_months": ln.term_months,
            "interest_rate": str(ln.interest_rate),
            "loan_type": ln.loan_type,
        },
    )
    return ok(_detail(_require_loan(loans, ln.id, with_details=True), as_of), message="Loan created")


@router.put("/{loan_id}", response_model=ApiResponse[LoanDetailOut])
def update_loan(
    loan_id: int,
    body: LoanUpdate,
    loans: LoanRepository = Depends(loans_repo),
    clients: ClientRepository = Depends(clients_repo),
    as_of: date = Depends(today),
    u=Depends(current_user),
):
    ln = _require_loan(loans, loan_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequest("No fields to update", code="no_changes")

    if "client_id" in changes:
        _require_client(clients, changes["client_id"])
    if "status" in changes:
        check_loan_transition(ln.status, changes["status"])

    for k, v in changes.items():
        setattr(ln, k, v.value if isinstance(v, (LoanStatus, LoanType)) else v)
    if "client_id" in changes:
        # payments follow their loan to the new client
        for p in ln.payments:
            p.client_id = ln.client_id
    if ln.status == LoanStatus.APPROVED:
        _stamp_approval(ln, datetime.now(timezone.utc).replace(tzinfo=None))
    if "term_months" in changes and ln.approved_at is not None:
        ln.due_date = add_months(ln.approved_at.date(), ln.term_months)
    loans.save(ln)

    log_event(
        loans.s,
        username=u.get("sub"),
        action="loan.update",
        entity_type="loan",
        entity_id=loan_id,
        details=changes,
    )
    return ok(_detail(_require_loan(loans, loan_id, with_details=True), as_of), message="Loan updated")


@router.delete("/{loan_id}", response_model=ApiResponse[None])
def delete_loan(loan_id: int, loans: LoanRepository = Depends(loans_repo), u=Depends(current_user)):
    ln = _require_loan(loans, loan_id)
    details = {"client_id": ln.client_id, "amount": str(ln.amount), "status": ln.status}
    loans.delete(ln)

    log_event(
        loans.s,
        username=u.get("sub"),
        action="loan.delete",
        entity_type="loan",
        entity_id=loan_id,
        details=details,
    )
    return ok(message="Loan deleted")


@router.get("/{loan_id}/schedule", response_model=ApiResponse[list[ScheduleRowOut]])
def loan_schedule(loan_id: int, loans: LoanRepository = Depends(loans_repo), u=Depends(current_user)):
    ln = _require_loan(loans, loan_id)
    start = ln.approved_at.date() if ln.approved_at else ln.created_at.date()
    rows = amortization_schedule(ln.amount, ln.term_months, ln.interest_rate, start)
    return ok(
        [
            {
                "period": r.period,
                "due_date": r.due_date,
                "payment": float(r.payment),
                "principal": float(r.principal),
                "interest": float(r.interest),
                "balance": float(r.balance),
            }
            for r in rows
        ]
    )


@router.get("/{loan_id}/schedule.xlsx")
def loan_schedule_export(
    loan_id: int,
    loans: LoanRepository = Depends(loans_repo),
    as_of: date = Depends(today),
    u=Depends(current_user),
):
    ln = _require_loan(loans, loan_id, with_details=True)

    buf = BytesIO()
    build_schedule_report(ln, as_of, buf)
    buf.seek(0)

    filename = f"loan_{ln.id}_schedule_{as_of}.xlsx"
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
