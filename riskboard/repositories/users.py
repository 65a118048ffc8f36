from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from riskboard.models.user import User


class UserRepository:
    def __init__(self, s: Session):
        self.s = s

    def get(self, user_id: int) -> User | None:
        return self.s.execute(select(User).where(User.id == user_id)).scalar_one_or_none()

    def by_email(self, email: str) -> User | None:
        return self.s.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def list_page(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        role: str | None = None,
        status: str | None = None,
    ) -> tuple[list[User], int]:
        q = select(User)
        if search:
            like = f"%{search.strip().lower()}%"
            q = q.where(or_(func.lower(User.name).like(like), func.lower(User.email).like(like)))
        if role:
            q = q.where(User.role == role)
        if status:
            q = q.where(User.status == status)

        total = self.s.execute(select(func.count()).select_from(q.subquery())).scalar_one()
        rows = self.s.execute(q.order_by(User.email.asc()).offset((page - 1) * limit).limit(limit)).scalars().all()
        return list(rows), int(total)

    def add(self, user: User) -> User:
        self.s.add(user)
        self.s.commit()
        self.s.refresh(user)
        return user

    def save(self, user: User) -> User:
        return self.add(user)

    def delete(self, user: User) -> None:
        self.s.delete(user)
        self.s.commit()
