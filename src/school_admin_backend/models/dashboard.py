'''
The aggregate shown on the dashboard root page.
'''
from pydantic import BaseModel, Field

from .enrollments import EnrollmentRead


class MonthlyTotal(BaseModel):
    month: str  # 'YYYY-MM'
    total_amount: float


class DashboardSummary(BaseModel):
    total_students: int = 0
    total_classes: int = 0
    total_payments: float = 0.0
    pending_payments: int = 0
    monthly_payments: list[MonthlyTotal] = Field(default_factory=list)
    recent_enrollments: list[EnrollmentRead] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
