from typing import Literal

from fastapi import APIRouter, Depends, Query

from riskboard.api.deps import Paging, require_admin, users_repo
from riskboard.core.errors import Conflict, NotFound
from riskboard.core.security import hash_password
from riskboard.models.user import User
from riskboard.repositories.users import UserRepository
from riskboard.schemas.common import ApiResponse, PageMeta, ok
from riskboard.schemas.user import UserCreate, UserOut, UserUpdate
from riskboard.services.audit import log_event

router = APIRouter(prefix="/users", tags=["users"])

def _require_user(users: UserRepository, user_id: int) -> User:
    user = users.get(user_id)
    if not user:
        raise NotFound("User not found", code="user_not_found")
    return user

@router.get("", response_model=ApiResponse[list[UserOut]])
def list_users(
    paging: Paging = Depends(),
    search: str | None = Query(default=None),
    role: Literal["admin", "user"] | None = Query(default=None),
    status: Literal["active", "inactive"] | None = Query(default=None),
    users: UserRepository = Depends(users_repo),
    u=Depends(require_admin),
):
    rows, total = users.list_page(paging.page, paging.limit, search=search, role=role, status=status)
    return ok(rows, pagination=PageMeta.build(paging.page, paging.limit, total))

@router.get("/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: int, users: UserRepository = Depends(users_repo), u=Depends(require_admin)):
    return ok(_require_user(users, user_id))

@router.post("", response_model=ApiResponse[UserOut], status_code=201)
def create_user(body: UserCreate, users: UserRepository = Depends(users_repo), u=Depends(require_admin)):
    if users.by_email(body.email):
        raise Conflict("A user with this email already exists", code="user_exists", details={"field": "email"})
    user = users.add(
        User(
            email=body.email,
            name=body.name,
            password_hash=hash_password(body.password),
            role=body.role,
            status=body.status,
        )
    )
    log_event(
        users.s,
        username=u.get("sub"),
        action="user.create",
        entity_type="user",
        entity_id=user.id,
        details={"email": user.email, "role": user.role},
    )
    return ok(user, message="User created")

@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def update_user(user_id: int, body: UserUpdate, users: UserRepository = Depends(users_repo), u=Depends(require_admin)):
    user = _require_user(users, user_id)
    if body.email is not None and body.email != user.email:
        if users.by_email(body.email):
            raise Conflict("A user with this email already exists", code="user_exists", details={"field": "email"})
        user.email = body.email
    if body.name is not None:
        user.name = body.name
    if body.role is not None:
        user.role = body.role
    if body.status is not None:
        user.status = body.status
    if body.password is not None:
        user.password_hash = hash_password(body.password)
    user = users.save(user)

    log_event(
        users.s,
        username=u.get("sub"),
        action="user.update",
        entity_type="user",
        entity_id=user_id,
        details=body.model_dump(exclude_none=True, exclude={"password"}),
    )
    return ok(user, message="User updated")

@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: int, users: UserRepository = Depends(users_repo), me=Depends(require_admin)):
    user = _require_user(users, user_id)
    if user.email == me.get("sub"):
        raise Conflict("You cannot delete your own account", code="cannot_delete_self")
    details = {"email": user.email, "role": user.role}
    users.delete(user)
    log_event(
        users.s,
        username=me.get("sub"),
        action="user.delete",
        entity_type="user",
        entity_id=user_id,
        details=details,
    )
    return ok(message="User deleted")
