from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Literal

from riskboard.schemas.client import EMAIL_RE

Role = Literal["admin", "user"]
UserStatus = Literal["active", "inactive"]


def _clean_email(v: str) -> str:
    v = (v or "").strip().lower()
    if not v:
        raise ValueError("email is required")
    if len(v) > 100 or not EMAIL_RE.match(v):
        raise ValueError("invalid email")
    return v


def _clean_name(v: str) -> str:
    v = (v or "").strip()
    if len(v) < 2:
        raise ValueError("name must be at least 2 characters")
    if len(v) > 50:
        raise ValueError("name too long")
    return v


class UserCreate(BaseModel):
    email: str
    name: str
    password: str
    role: Role = "user"
    status: UserStatus = "active"

    @field_validator("email")
    @classmethod
    def email_trim(cls, v: str):
        return _clean_email(v)

    @field_validator("name")
    @classmethod
    def name_trim(cls, v: str):
        return _clean_name(v)

    @field_validator("password")
    @classmethod
    def password_min(cls, v: str):
        v = str(v)
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v

class UserUpdate(BaseModel):
    email: str | None = None
    name: str | None = None
    password: str | None = None
    role: Role | None = None
    status: UserStatus | None = None

    @field_validator("email")
    @classmethod
    def email_trim(cls, v: str | None):
        return None if v is None else _clean_email(v)

    @field_validator("name")
    @classmethod
    def name_trim(cls, v: str | None):
        return None if v is None else _clean_name(v)

    @field_validator("password")
    @classmethod
    def password_min(cls, v: str | None):
        if v is None:
            return None
        v = str(v)
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v

class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
