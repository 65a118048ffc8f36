import logging
from decimal import Decimal

from riskboard.core.errors import AmountExceedsLimit, IneligibleClient
from riskboard.services.amortization import to_dec
from riskboard.services.risk_policy import MIN_CREDIT_SCORE, max_amount_for_score

logger = logging.getLogger(__name__)


def check_eligibility(credit_score: int, amount) -> Decimal:
    """Return the tier limit for ``credit_score`` or raise if the request is refused."""
    if credit_score < MIN_CREDIT_SCORE:
        logger.info("loan refused: credit score %s below %s", credit_score, MIN_CREDIT_SCORE)
        raise IneligibleClient(credit_score, MIN_CREDIT_SCORE)

    limit = max_amount_for_score(credit_score)
    requested = to_dec(amount)
    if requested > limit:
        logger.info("loan refused: %s over limit %s for score %s", requested, limit, credit_score)
        raise AmountExceedsLimit(requested, int(limit), credit_score)
    return limit
