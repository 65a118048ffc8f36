from sqlalchemy import select
from sqlalchemy.orm import Session

from riskboard.models.payment import Payment


class PaymentRepository:
    def __init__(self, s: Session):
        self.s = s

    def get(self, payment_id: int) -> Payment | None:
        return self.s.execute(select(Payment).where(Payment.id == payment_id)).scalar_one_or_none()

    def for_loan(self, loan_id: int) -> list[Payment]:
        return list(
            self.s.execute(
                select(Payment).where(Payment.loan_id == loan_id).order_by(Payment.payment_date.asc(), Payment.id.asc())
            )
            .scalars()
            .all()
        )

    def add(self, payment: Payment) -> Payment:
        self.s.add(payment)
        self.s.commit()
        self.s.refresh(payment)
        return payment

    def save(self, payment: Payment) -> Payment:
        return self.add(payment)

    def delete(self, payment: Payment) -> None:
        self.s.delete(payment)
        self.s.commit()
