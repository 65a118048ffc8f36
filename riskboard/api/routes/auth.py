from fastapi import APIRouter, Depends

from riskboard.api.deps import current_user, users_repo
from riskboard.core.errors import Forbidden, Unauthorized
from riskboard.core.security import create_access_token, verify_password
from riskboard.repositories.users import UserRepository
from riskboard.schemas.auth import LoginIn, MeOut, TokenOut
from riskboard.schemas.common import ApiResponse, ok

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=ApiResponse[TokenOut])
def login(body: LoginIn, users: UserRepository = Depends(users_repo)):
    u = users.by_email(body.email)
    if not u or not verify_password(body.password, u.password_hash):
        raise Unauthorized("Invalid email or password", code="bad_credentials")
    if u.status != "active":
        raise Forbidden("User account is inactive", code="user_inactive")
    token = create_access_token(sub=u.email, role=u.role, uid=u.id)
    return ok({"access_token": token, "role": u.role})

@router.get("/me", response_model=ApiResponse[MeOut])
def me(u=Depends(current_user)):
    return ok({"email": u.get("sub"), "role": u.get("role"), "uid": u.get("uid")})
