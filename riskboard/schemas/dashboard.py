from datetime import datetime

from pydantic import BaseModel


class SummaryOut(BaseModel):
    total_applications: int
    total_credit_amount: float
    avg_credit_amount: float
    defaulted: int
    default_rate: float


class LoanDistributionItem(BaseModel):
    contract_type: str
    count: int
    percentage: float
    avg_amount: float


class DefaultRiskItem(BaseModel):
    risk_category: str
    total_applications: int
    defaulted: int
    default_rate: float
    avg_credit_amount: float


class CreditTrendItem(BaseModel):
    month: str
    total_applications: int
    avg_credit_amount: float
    total_credit_amount: float


class DemographicsItem(BaseModel):
    category: str
    subcategory: str
    count: int
    avg_income: float
    default_rate: float


class PaymentBehaviorItem(BaseModel):
    payment_status: str
    count: int
    avg_days_overdue: float
    total_debt_amount: float


class DashboardMeta(BaseModel):
    execution_time_ms: float
    generated_at: datetime


class DashboardOut(BaseModel):
    summary: SummaryOut
    loan_distribution: list[LoanDistributionItem]
    default_risk: list[DefaultRiskItem]
    credit_trends: list[CreditTrendItem]
    demographics: list[DemographicsItem]
    payment_behavior: list[PaymentBehaviorItem]
    metadata: DashboardMeta
