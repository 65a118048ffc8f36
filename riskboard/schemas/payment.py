from pydantic import BaseModel, Field
from datetime import date, datetime

from riskboard.models.enums import PaymentMethod, PaymentStatus

class PaymentCreate(BaseModel):
    amount: float = Field(gt=0)
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    status: PaymentStatus = PaymentStatus.PENDING

class PaymentUpdate(BaseModel):
    amount: float | None = Field(default=None, gt=0)
    payment_date: date | None = None
    payment_method: PaymentMethod | None = None
    status: PaymentStatus | None = None

class PaymentOut(BaseModel):
    id: int
    loan_id: int
    client_id: int
    amount: float
    payment_date: date
    payment_method: str
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
