from fastapi import APIRouter, Depends

from riskboard.api.deps import current_user, loans_repo, payments_repo
from riskboard.core.errors import BadRequest, NotFound
from riskboard.models.enums import PaymentMethod, PaymentStatus
from riskboard.models.payment import Payment
from riskboard.repositories.loans import LoanRepository
from riskboard.repositories.payments import PaymentRepository
from riskboard.schemas.common import ApiResponse, ok
from riskboard.schemas.payment import PaymentCreate, PaymentOut, PaymentUpdate
from riskboard.services.audit import log_event
from riskboard.services.lifecycle import check_payment_transition

router = APIRouter(tags=["payments"])


def _require_loan(loans: LoanRepository, loan_id: int):
    ln = loans.get(loan_id)
    if ln is None:
        raise NotFound("Loan not found", code="loan_not_found")
    return ln


def _require_payment(payments: PaymentRepository, payment_id: int) -> Payment:
    p = payments.get(payment_id)
    if p is None:
        raise NotFound("Payment not found", code="payment_not_found")
    return p


@router.get("/loans/{loan_id}/payments", response_model=ApiResponse[list[PaymentOut]])
def list_payments(
    loan_id: int,
    loans: LoanRepository = Depends(loans_repo),
    payments: PaymentRepository = Depends(payments_repo),
    u=Depends(current_user),
):
    _require_loan(loans, loan_id)
    return ok(payments.for_loan(loan_id))


@router.post("/loans/{loan_id}/payments", response_model=ApiResponse[PaymentOut], status_code=201)
def create_payment(
    loan_id: int,
    body: PaymentCreate,
    loans: LoanRepository = Depends(loans_repo),
    payments: PaymentRepository = Depends(payments_repo),
    u=Depends(current_user),
):
    ln = _require_loan(loans, loan_id)
    p = payments.add(
        Payment(
            loan_id=ln.id,
            client_id=ln.client_id,
            amount=body.amount,
            payment_date=body.payment_date,
            payment_method=body.payment_method.value,
            status=body.status.value,
        )
    )

    log_event(
        payments.s,
        username=u.get("sub"),
        action="payment.create",
        entity_type="payment",
        entity_id=p.id,
        details={"loan_id": loan_id, "amount": str(p.amount), "status": p.status},
    )
    return ok(p, message="Payment recorded")


@router.put("/payments/{payment_id}", response_model=ApiResponse[PaymentOut])
def update_payment(
    payment_id: int,
    body: PaymentUpdate,
    payments: PaymentRepository = Depends(payments_repo),
    u=Depends(current_user),
):
    p = _require_payment(payments, payment_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequest("No fields to update", code="no_changes")
    if "status" in changes:
        check_payment_transition(p.status, changes["status"])

    for k, v in changes.items():
        setattr(p, k, v.value if isinstance(v, (PaymentStatus, PaymentMethod)) else v)
    p = payments.save(p)

    log_event(
        payments.s,
        username=u.get("sub"),
        action="payment.update",
        entity_type="payment",
        entity_id=payment_id,
        details=changes,
    )
    return ok(p, message="Payment updated")


@router.delete("/payments/{payment_id}", response_model=ApiResponse[None])
def delete_payment(payment_id: int, payments: PaymentRepository = Depends(payments_repo), u=Depends(current_user)):
    p = _require_payment(payments, payment_id)
    details = {"loan_id": p.loan_id, "amount": str(p.amount), "status": p.status}
    payments.delete(p)

    log_event(
        payments.s,
        username=u.get("sub"),
        action="payment.delete",
        entity_type="payment",
        entity_id=payment_id,
        details=details,
    )
    return ok(message="Payment deleted")
