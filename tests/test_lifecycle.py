import pytest

from riskboard.core.errors import InvalidStatusTransition
from riskboard.models.enums import LoanStatus, PaymentStatus
from riskboard.services.lifecycle import check_loan_transition, check_payment_transition


@pytest.mark.parametrize(
    "current,requested",
    [
        ("PENDING", "APPROVED"),
        ("PENDING", "REJECTED"),
        ("APPROVED", "ACTIVE"),
        ("ACTIVE", "COMPLETED"),
        ("ACTIVE", "DEFAULTED"),
        ("DEFAULTED", "ACTIVE"),
        ("ACTIVE", "ACTIVE"),
    ],
)
def test_allowed_loan_transitions(current, requested):
    check_loan_transition(current, requested)


@pytest.mark.parametrize(
    "current,requested",
    [
        ("COMPLETED", "ACTIVE"),
        ("REJECTED", "APPROVED"),
        ("PENDING", "ACTIVE"),
        ("APPROVED", "DEFAULTED"),
    ],
)
def test_refused_loan_transitions(current, requested):
    with pytest.raises(InvalidStatusTransition) as ei:
        check_loan_transition(current, requested)
    assert ei.value.details == {"entity": "loan", "from": current, "to": requested}
    assert ei.value.status_code == 400


def test_loan_transition_accepts_enum_members():
    check_loan_transition(LoanStatus.APPROVED, LoanStatus.ACTIVE)


def test_payment_transitions():
    check_payment_transition("PENDING", PaymentStatus.COMPLETED)
    check_payment_transition("FAILED", "PENDING")

    with pytest.raises(InvalidStatusTransition):
        check_payment_transition("COMPLETED", "PENDING")
    with pytest.raises(InvalidStatusTransition):
        check_payment_transition("CANCELLED", "COMPLETED")


def test_unknown_status_is_a_value_error():
    with pytest.raises(ValueError):
        check_loan_transition("PENDING", "ARCHIVED")
