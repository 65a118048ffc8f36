from datetime import date, datetime

from sqlalchemy import Integer, Date, DateTime, func, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from riskboard.db.base import Base


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50), index=True)
    identification: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(15))
    address: Mapped[str] = mapped_column(String(200))
    date_of_birth: Mapped[date] = mapped_column(Date)

    credit_score: Mapped[int] = mapped_column(Integer, index=True)
    status: Mapped[str] = mapped_column(String(16), default="ACTIVE", index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    loans = relationship("Loan", back_populates="client", order_by="Loan.id")
    payments = relationship("Payment", back_populates="client", order_by="Payment.payment_date")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
