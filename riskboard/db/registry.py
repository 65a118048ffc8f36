"""Imports every mapped model so relationships resolve and metadata is complete."""

from riskboard.models.application import Application  # noqa: F401
from riskboard.models.audit_log import AuditLog  # noqa: F401
from riskboard.models.client import Client  # noqa: F401
from riskboard.models.credit_history import CreditHistory  # noqa: F401
from riskboard.models.loan import Loan  # noqa: F401
from riskboard.models.payment import Payment  # noqa: F401
from riskboard.models.user import User  # noqa: F401
