from datetime import datetime

from sqlalchemy import Integer, DateTime, func, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from riskboard.db.base import Base


class CreditHistory(Base):
    __tablename__ = "credit_history"

    sk_id_bureau: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    sk_id_curr: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    credit_active: Mapped[str | None] = mapped_column(String(50), nullable=True)
    credit_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    credit_sum: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    credit_sum_debt: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    credit_sum_limit: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)

    days_credit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    credit_day_overdue: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())
