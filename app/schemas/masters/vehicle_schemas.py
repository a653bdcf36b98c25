from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from app.models.enums.vehicle_enums import VehicleType, FuelType


class VehicleCreate(BaseModel):
    type: VehicleType
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    fuel: Optional[FuelType] = None
    identification: str = Field(min_length=1, max_length=50)
    power: Optional[int] = Field(None, gt=0)
    rate_per_km: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class VehicleUpdate(BaseModel):
    type: Optional[VehicleType] = None
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    fuel: Optional[FuelType] = None
    identification: Optional[str] = Field(None, min_length=1, max_length=50)
    power: Optional[int] = Field(None, gt=0)
    rate_per_km: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None

    version: int


class VehicleOut(BaseModel):
    id: int
    type: VehicleType
    brand: Optional[str]
    model: Optional[str]
    category: Optional[str]
    fuel: Optional[FuelType]
    identification: str
    power: Optional[int]
    rate_per_km: Decimal
    is_active: bool
    version: int
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class VehicleListData(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[VehicleOut]
