from pydantic import BaseModel, field_validator

class LoginIn(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_norm(cls, v: str):
        return (v or "").strip().lower()

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str

class MeOut(BaseModel):
    email: str
    role: str
    uid: int | None = None
