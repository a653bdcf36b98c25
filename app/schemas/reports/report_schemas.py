from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from decimal import Decimal
from datetime import date, datetime

from app.models.enums.report_status import ReportStatus
from app.schemas.reports.balance_schemas import (
    BalanceComputation,
    BalanceDisplay,
    ReimbursementInfo,
)
from app.schemas.expenses.expense_schemas import ExpenseOut


# =====================================================
# CREATE / UPDATE
# =====================================================
class ReportCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date
    destination: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = Field(None, max_length=255)
    status: ReportStatus = ReportStatus.in_progress
    client: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    # range is checked by validate_advance so the caller gets a named reason
    advance: Decimal = Field(Decimal("0.00"), decimal_places=2)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class ReportUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    destination: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = Field(None, max_length=255)
    status: Optional[ReportStatus] = None
    client: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    advance: Optional[Decimal] = Field(None, decimal_places=2)

    version: int


# =====================================================
# OUTPUT
# =====================================================
class ReportSummaryOut(BaseModel):
    id: int
    title: str
    start_date: date
    end_date: date
    destination: Optional[str]
    purpose: Optional[str]
    status: ReportStatus
    client: Optional[str]
    notes: Optional[str]
    advance: Decimal
    version: int

    total_amount: Decimal
    expense_count: int
    remainder: Decimal
    reimbursement_amount: Decimal
    direction: str

    created_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]


class ReportOut(ReportSummaryOut):
    balance: BalanceComputation
    reimbursement: ReimbursementInfo
    balance_display: BalanceDisplay
    expenses: List[ExpenseOut]


class ReportListData(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[ReportSummaryOut]


class ReimbursementResult(BaseModel):
    report_id: int
    reimbursed_expenses: int
    new_status: ReportStatus


class ReversalResult(BaseModel):
    report_id: int
    reversed_expenses: int
    new_status: ReportStatus
