"""Domain errors raised by services and routes.

Each error carries a machine-readable ``code`` and the HTTP status the API
answers with; ``riskboard.main`` turns them into the error envelope.
"""


class AppError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str | None = None, details: dict | None = None, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message or self.code.replace("_", " ")
        super().__init__(self.message)
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class Unauthorized(AppError):
    status_code = 401
    code = "not_authenticated"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"


class Conflict(AppError):
    status_code = 409
    code = "conflict"


class BusinessRuleError(AppError):
    """A request that is well-formed but breaks a lending rule."""

    status_code = 400
    code = "business_rule_violation"


class IneligibleClient(BusinessRuleError):
    code = "ineligible_client"

    def __init__(self, credit_score: int, minimum: int):
        super().__init__(
            f"Insufficient credit score ({credit_score}). Minimum required: {minimum}",
            details={"credit_score": credit_score, "minimum": minimum},
        )


class AmountExceedsLimit(BusinessRuleError):
    code = "amount_exceeds_limit"

    def __init__(self, amount, limit, credit_score: int):
        super().__init__(
            f"Amount exceeds the limit for credit score {credit_score}. Maximum: {limit:,}",
            details={"amount": str(amount), "limit": limit, "credit_score": credit_score},
        )


class InvalidStatusTransition(BusinessRuleError):
    code = "invalid_status_transition"

    def __init__(self, entity: str, current: str, requested: str):
        super().__init__(
            f"{entity} cannot move from {current} to {requested}",
            details={"entity": entity, "from": current, "to": requested},
        )


class BadRequest(AppError):
    status_code = 400
    code = "bad_request"
