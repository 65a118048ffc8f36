from pydantic import BaseModel, Field
from datetime import date, datetime

from riskboard.models.enums import LoanStatus, LoanType
from riskboard.schemas.client import ClientOut
from riskboard.schemas.payment import PaymentOut

class LoanCreate(BaseModel):
    client_id: int
    amount: float = Field(ge=1000, le=1000000)
    term_months: int = Field(ge=6, le=360)
    interest_rate: float = Field(ge=0.1, le=50)
    loan_type: LoanType

class LoanUpdate(BaseModel):
    client_id: int | None = None
    amount: float | None = Field(default=None, ge=1000, le=1000000)
    term_months: int | None = Field(default=None, ge=6, le=360)
    interest_rate: float | None = Field(default=None, ge=0.1, le=50)
    loan_type: LoanType | None = None
    status: LoanStatus | None = None

class LoanQuoteIn(BaseModel):
    amount: float = Field(gt=0)
    term_months: int = Field(gt=0, le=600)
    interest_rate: float = Field(ge=0, le=100)

class LoanQuoteOut(BaseModel):
    monthly_payment: float
    total_amount: float
    total_interest: float

class LoanOut(BaseModel):
    id: int
    client_id: int
    amount: float
    term_months: int
    interest_rate: float
    loan_type: str
    status: str
    approved_at: datetime | None = None
    due_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True

class LoanDetailOut(LoanOut):
    client: ClientOut
    payments: list[PaymentOut]

    monthly_payment: float
    total_amount: float
    total_interest: float

    total_paid: float
    remaining_balance: float
    next_payment_due: date | None
    payment_status: str
    days_overdue: int
    progress_percent: float

class ScheduleRowOut(BaseModel):
    period: int
    due_date: date
    payment: float
    principal: float
    interest: float
    balance: float
