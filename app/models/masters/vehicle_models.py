from sqlalchemy import Column, Integer, String, Boolean, Numeric, Enum, CheckConstraint, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, VersionMixin
from app.models.enums.vehicle_enums import VehicleType, FuelType


class Vehicle(Base, TimestampMixin, VersionMixin):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True)
    type = Column(Enum(VehicleType), nullable=False, index=True)
    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    category = Column(String(100), nullable=True)
    fuel = Column(Enum(FuelType), nullable=True)
    identification = Column(String(50), nullable=False, unique=True, index=True)
    power = Column(Integer, nullable=True)
    rate_per_km = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("ix_vehicle_active", "is_active"),
        CheckConstraint("rate_per_km > 0", name="ck_vehicle_rate_positive"),
    )

    def __repr__(self):
        return f"<Vehicle id={self.id} identification={self.identification} rate={self.rate_per_km}>"
