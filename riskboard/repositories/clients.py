from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from riskboard.models.client import Client
from riskboard.models.loan import Loan
from riskboard.models.payment import Payment


class ClientRepository:
    def __init__(self, s: Session):
        self.s = s

    def get(self, client_id: int) -> Client | None:
        return self.s.execute(select(Client).where(Client.id == client_id)).scalar_one_or_none()

    def find_duplicate(self, identification: str | None, email: str | None, exclude_id: int | None = None) -> Client | None:
        conds = []
        if identification:
            conds.append(Client.identification == identification)
        if email:
            conds.append(Client.email == email)
        if not conds:
            return None
        q = select(Client).where(or_(*conds))
        if exclude_id is not None:
            q = q.where(Client.id != exclude_id)
        return self.s.execute(q.limit(1)).scalar_one_or_none()

    def list_page(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
        min_score: int | None = None,
        max_score: int | None = None,
    ) -> tuple[list[Client], int]:
        q = select(Client)
        if search:
            like = f"%{search.strip().lower()}%"
            q = q.where(
                or_(
                    func.lower(Client.first_name).like(like),
                    func.lower(Client.last_name).like(like),
                    func.lower(Client.email).like(like),
                    func.lower(Client.identification).like(like),
                )
            )
        if status:
            q = q.where(Client.status == status)
        if min_score is not None:
            q = q.where(Client.credit_score >= min_score)
        if max_score is not None:
            q = q.where(Client.credit_score <= max_score)

        total = self.s.execute(select(func.count()).select_from(q.subquery())).scalar_one()
        rows = (
            self.s.execute(
                q.order_by(Client.last_name.asc(), Client.first_name.asc(), Client.id.asc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return list(rows), int(total)

    def loan_count(self, client_id: int) -> int:
        return self.s.execute(select(func.count(Loan.id)).where(Loan.client_id == client_id)).scalar_one()

    def payment_count(self, client_id: int) -> int:
        return self.s.execute(select(func.count(Payment.id)).where(Payment.client_id == client_id)).scalar_one()

    def add(self, client: Client) -> Client:
        self.s.add(client)
        self.s.commit()
        self.s.refresh(client)
        return client

    def save(self, client: Client) -> Client:
        return self.add(client)

    def delete(self, client: Client) -> None:
        self.s.delete(client)
        self.s.commit()
