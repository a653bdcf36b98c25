from pydantic import BaseModel
from typing import List
from decimal import Decimal
from datetime import date, datetime

from app.models.enums.report_status import ReportStatus


class ExpenseTotals(BaseModel):
    amount: Decimal
    count: int
    amount_change_pct: float
    count_change_pct: float


class PendingReimbursement(BaseModel):
    amount: Decimal
    count: int


class MileageTotals(BaseModel):
    distance_km: Decimal
    amount: Decimal


class RecentExpense(BaseModel):
    id: int
    expense_date: date
    description: str
    amount: Decimal
    category_name: str
    category_color: str | None
    report_title: str


class RecentReport(BaseModel):
    id: int
    title: str
    status: ReportStatus
    updated_at: datetime | None


class DashboardMetrics(BaseModel):
    month_expenses: ExpenseTotals
    active_reports: int
    pending_reimbursement: PendingReimbursement
    month_mileage: MileageTotals
    recent_expenses: List[RecentExpense]
    recent_reports: List[RecentReport]


class CategorySlice(BaseModel):
    name: str
    value: Decimal
    count: int
    color: str


class MonthlyExpensePoint(BaseModel):
    month: str
    amount: Decimal
    count: int


class MonthlyMileagePoint(BaseModel):
    month: str
    distance_km: Decimal
    trips: int
    amount: Decimal


class DashboardCharts(BaseModel):
    by_category: List[CategorySlice]
    by_category_total: Decimal
    monthly_expenses: List[MonthlyExpensePoint]
    monthly_mileage: List[MonthlyMileagePoint]
