from datetime import datetime

from sqlalchemy import Integer, DateTime, func, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from riskboard.db.base import Base


class Application(Base):
    """Credit application records the dashboard reports on (read-only here)."""

    __tablename__ = "applications"

    sk_id_curr: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    # 1 = the applicant defaulted
    target: Mapped[int | None] = mapped_column(Integer, nullable=True)

    contract_type: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    own_car: Mapped[int | None] = mapped_column(Integer, nullable=True)
    own_realty: Mapped[int | None] = mapped_column(Integer, nullable=True)
    children: Mapped[int | None] = mapped_column(Integer, nullable=True)

    income_total: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    credit_amount: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    annuity: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    goods_price: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)

    occupation_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    organization_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now(), index=True)
