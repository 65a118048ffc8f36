from datetime import date

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import jwt

from riskboard.db.session import SessionLocal
from riskboard.core.errors import Forbidden, Unauthorized
from riskboard.core.security import decode_token
from riskboard.repositories.clients import ClientRepository
from riskboard.repositories.loans import LoanRepository
from riskboard.repositories.payments import PaymentRepository
from riskboard.repositories.users import UserRepository
from riskboard.utils.timezone import today_local

bearer = HTTPBearer(auto_error=False)

def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def today() -> date:
    return today_local()

def current_user(creds: HTTPAuthorizationCredentials | None = Depends(bearer)):
    if creds is None:
        raise Unauthorized()
    try:
        return decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired token", code="invalid_token")

def require_admin(u=Depends(current_user)):
    if u.get("role") != "admin":
        raise Forbidden("Administrator role required", code="admin_only")
    return u

class Paging:
    def __init__(
        self,
        page: int = Query(default=1, ge=1),
        limit: int = Query(default=10, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit

def clients_repo(s: Session = Depends(db)) -> ClientRepository:
    return ClientRepository(s)

def loans_repo(s: Session = Depends(db)) -> LoanRepository:
    return LoanRepository(s)

def payments_repo(s: Session = Depends(db)) -> PaymentRepository:
    return PaymentRepository(s)

def users_repo(s: Session = Depends(db)) -> UserRepository:
    return UserRepository(s)
