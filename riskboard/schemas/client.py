import re
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from riskboard.models.enums import ClientStatus

NAME_RE = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚñÑüÜ\s]+$")
IDENT_RE = re.compile(r"^[0-9A-Za-z-]+$")
PHONE_RE = re.compile(r"^[+]?[0-9\s\-()]+$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _age_on(born: date, today: date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def _name(v: str, label: str) -> str:
    v = (v or "").strip()
    if len(v) < 2:
        raise ValueError(f"{label} must be at least 2 characters")
    if len(v) > 50:
        raise ValueError(f"{label} must be at most 50 characters")
    if not NAME_RE.match(v):
        raise ValueError(f"{label} may only contain letters")
    return v


def _identification(v: str) -> str:
    v = (v or "").strip()
    if not 8 <= len(v) <= 20:
        raise ValueError("identification must be 8 to 20 characters")
    if not IDENT_RE.match(v):
        raise ValueError("invalid identification format")
    return v


def _email(v: str) -> str:
    v = (v or "").strip().lower()
    if len(v) > 100 or not EMAIL_RE.match(v):
        raise ValueError("invalid email")
    return v


def _phone(v: str) -> str:
    v = (v or "").strip()
    if not 8 <= len(v) <= 15:
        raise ValueError("phone must be 8 to 15 characters")
    if not PHONE_RE.match(v):
        raise ValueError("invalid phone format")
    return v


def _address(v: str) -> str:
    v = (v or "").strip()
    if not 10 <= len(v) <= 200:
        raise ValueError("address must be 10 to 200 characters")
    return v


def _birth(v: date) -> date:
    age = _age_on(v, date.today())
    if age < 18 or age > 100:
        raise ValueError("client must be between 18 and 100 years old")
    return v


class ClientCreate(BaseModel):
    first_name: str
    last_name: str
    identification: str
    email: str
    phone: str
    address: str
    date_of_birth: date
    credit_score: int = Field(ge=300, le=850)
    status: ClientStatus = ClientStatus.ACTIVE

    @field_validator("first_name")
    @classmethod
    def first_name_ok(cls, v: str):
        return _name(v, "first name")

    @field_validator("last_name")
    @classmethod
    def last_name_ok(cls, v: str):
        return _name(v, "last name")

    @field_validator("identification")
    @classmethod
    def identification_ok(cls, v: str):
        return _identification(v)

    @field_validator("email")
    @classmethod
    def email_ok(cls, v: str):
        return _email(v)

    @field_validator("phone")
    @classmethod
    def phone_ok(cls, v: str):
        return _phone(v)

    @field_validator("address")
    @classmethod
    def address_ok(cls, v: str):
        return _address(v)

    @field_validator("date_of_birth")
    @classmethod
    def birth_ok(cls, v: date):
        return _birth(v)


class ClientUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    identification: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    credit_score: int | None = Field(default=None, ge=300, le=850)
    status: ClientStatus | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def names_ok(cls, v: str | None, info):
        if v is None:
            return None
        return _name(v, info.field_name.replace("_", " "))

    @field_validator("identification")
    @classmethod
    def identification_ok(cls, v: str | None):
        return None if v is None else _identification(v)

    @field_validator("email")
    @classmethod
    def email_ok(cls, v: str | None):
        return None if v is None else _email(v)

    @field_validator("phone")
    @classmethod
    def phone_ok(cls, v: str | None):
        return None if v is None else _phone(v)

    @field_validator("address")
    @classmethod
    def address_ok(cls, v: str | None):
        return None if v is None else _address(v)

    @field_validator("date_of_birth")
    @classmethod
    def birth_ok(cls, v: date | None):
        return None if v is None else _birth(v)


class ClientOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    identification: str
    email: str
    phone: str
    address: str
    date_of_birth: date
    credit_score: int
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
