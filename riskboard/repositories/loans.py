from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from riskboard.models.loan import Loan


class LoanRepository:
    def __init__(self, s: Session):
        self.s = s

    def get(self, loan_id: int, with_details: bool = False) -> Loan | None:
        q = select(Loan).where(Loan.id == loan_id)
        if with_details:
            q = q.options(selectinload(Loan.client), selectinload(Loan.payments))
        return self.s.execute(q).scalar_one_or_none()

    def list_page(
        self,
        page: int,
        limit: int,
        client_id: int | None = None,
        status: str | None = None,
        loan_type: str | None = None,
    ) -> tuple[list[Loan], int]:
        q = select(Loan)
        if client_id is not None:
            q = q.where(Loan.client_id == client_id)
        if status:
            q = q.where(Loan.status == status)
        if loan_type:
            q = q.where(Loan.loan_type == loan_type)

        total = self.s.execute(select(func.count()).select_from(q.subquery())).scalar_one()
        rows = (
            self.s.execute(q.order_by(Loan.created_at.desc(), Loan.id.desc()).offset((page - 1) * limit).limit(limit))
            .scalars()
            .all()
        )
        return list(rows), int(total)

    def add(self, loan: Loan) -> Loan:
        self.s.add(loan)
        self.s.commit()
        self.s.refresh(loan)
        return loan

    def save(self, loan: Loan) -> Loan:
        return self.add(loan)

    def delete(self, loan: Loan) -> None:
        self.s.delete(loan)
        self.s.commit()
