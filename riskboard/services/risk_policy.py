"""Lending thresholds shared by the loan engine and the dashboard.

A pending payment overdue by more than ``DEFAULT_AFTER_DAYS`` marks the loan
as defaulted; anything from one day up to that limit is late. The dashboard
overdue buckets split both ranges further but keep the same boundary.
"""

from decimal import Decimal

MIN_CREDIT_SCORE = 600

# (minimum score, maximum amount), highest tier first
CREDIT_TIERS: tuple[tuple[int, Decimal], ...] = (
    (750, Decimal("500000")),
    (700, Decimal("300000")),
)
BASE_TIER_LIMIT = Decimal("100000")

DEFAULT_AFTER_DAYS = 90

# (upper bound in days inclusive, label); None closes the last bucket
OVERDUE_BUCKETS: tuple[tuple[int | None, str], ...] = (
    (0, "On Time"),
    (30, "1-30 Days Late"),
    (DEFAULT_AFTER_DAYS, "31-90 Days Late"),
    (180, "91-180 Days Late"),
    (None, "Over 180 Days Late"),
)

# (upper bound of total income inclusive, label)
INCOME_BRACKETS: tuple[tuple[int | None, str], ...] = (
    (100000, "Low Income"),
    (300000, "Medium Income"),
    (500000, "High Income"),
    (None, "Very High Income"),
)


def max_amount_for_score(credit_score: int) -> Decimal:
    for min_score, limit in CREDIT_TIERS:
        if credit_score >= min_score:
            return limit
    return BASE_TIER_LIMIT
