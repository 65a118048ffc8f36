from riskboard.core.errors import InvalidStatusTransition
from riskboard.models.enums import LoanStatus, PaymentStatus

LOAN_TRANSITIONS: dict[LoanStatus, frozenset[LoanStatus]] = {
    LoanStatus.PENDING: frozenset({LoanStatus.APPROVED, LoanStatus.REJECTED}),
    LoanStatus.APPROVED: frozenset({LoanStatus.ACTIVE, LoanStatus.REJECTED}),
    LoanStatus.ACTIVE: frozenset({LoanStatus.COMPLETED, LoanStatus.DEFAULTED}),
    LoanStatus.DEFAULTED: frozenset({LoanStatus.ACTIVE, LoanStatus.COMPLETED}),
    LoanStatus.COMPLETED: frozenset(),
    LoanStatus.REJECTED: frozenset(),
}

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}


def check_loan_transition(current: str, requested: str) -> None:
    cur, req = LoanStatus(current), LoanStatus(requested)
    if cur != req and req not in LOAN_TRANSITIONS[cur]:
        raise InvalidStatusTransition("loan", cur.value, req.value)


def check_payment_transition(current: str, requested: str) -> None:
    cur, req = PaymentStatus(current), PaymentStatus(requested)
    if cur != req and req not in PAYMENT_TRANSITIONS[cur]:
        raise InvalidStatusTransition("payment", cur.value, req.value)
