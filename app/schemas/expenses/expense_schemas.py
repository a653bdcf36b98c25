from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import date, datetime

from app.schemas.masters.category_schemas import CategoryOut
from app.schemas.masters.vehicle_schemas import VehicleOut


# =====================================================
# INPUTS
# =====================================================
class ExpenseCreate(BaseModel):
    report_id: int = Field(gt=0)
    category_id: int = Field(gt=0)
    expense_date: date
    description: str = Field(min_length=1, max_length=255)
    supplier: Optional[str] = Field(None, max_length=255)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    notes: Optional[str] = None
    reimbursable: bool = True
    reimbursed: bool = False
    bill_client: bool = False

    # mileage category only
    vehicle_id: Optional[int] = Field(None, gt=0)
    distance_km: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    origin: Optional[str] = Field(None, max_length=255)
    destination: Optional[str] = Field(None, max_length=255)


class ExpenseUpdate(BaseModel):
    category_id: Optional[int] = Field(None, gt=0)
    expense_date: Optional[date] = None
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    supplier: Optional[str] = Field(None, max_length=255)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    notes: Optional[str] = None
    reimbursable: Optional[bool] = None
    reimbursed: Optional[bool] = None
    bill_client: Optional[bool] = None

    vehicle_id: Optional[int] = Field(None, gt=0)
    distance_km: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    origin: Optional[str] = Field(None, max_length=255)
    destination: Optional[str] = Field(None, max_length=255)

    version: int


MILEAGE_FIELDS = ("vehicle_id", "distance_km", "origin", "destination")


# =====================================================
# OUTPUTS
# =====================================================
class MileageOut(BaseModel):
    vehicle_id: int
    origin: str
    destination: str
    distance_km: Decimal
    rate_per_km: Decimal
    mileage_amount: Decimal
    vehicle: Optional[VehicleOut]

    model_config = {"from_attributes": True}


class ReceiptOut(BaseModel):
    id: int
    expense_id: int
    original_name: str
    stored_name: str
    size: int
    mime_type: str
    url: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportRef(BaseModel):
    id: int
    title: str

    model_config = {"from_attributes": True}


class ExpenseOut(BaseModel):
    id: int
    report_id: int
    category_id: int
    expense_date: date
    description: str
    supplier: Optional[str]
    amount: Decimal
    notes: Optional[str]
    reimbursable: bool
    reimbursed: bool
    bill_client: bool
    version: int

    category: Optional[CategoryOut]
    report: Optional[ReportRef]
    mileage: Optional[MileageOut]
    receipts: List[ReceiptOut] = []

    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ExpenseListData(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[ExpenseOut]
