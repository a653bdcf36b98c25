from sqlalchemy import Column, Integer, String, Date, Numeric, Boolean, Text, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin, VersionMixin
from app.utils.decimal_utils import to_decimal


class Expense(Base, TimestampMixin, AuditMixin, VersionMixin):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="RESTRICT"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)

    expense_date = Column(Date, nullable=False, index=True)
    description = Column(String(255), nullable=False)
    supplier = Column(String(255), nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    notes = Column(Text, nullable=True)

    reimbursable = Column(Boolean, nullable=False, default=True)
    reimbursed = Column(Boolean, nullable=False, default=False)
    bill_client = Column(Boolean, nullable=False, default=False)

    report = relationship("Report", back_populates="expenses", lazy="selectin")
    category = relationship("Category", back_populates="expenses", lazy="selectin")
    mileage = relationship(
        "MileageExpense",
        back_populates="expense",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    receipts = relationship(
        "Receipt",
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_expense_report_date", "report_id", "expense_date"),
        Index("ix_expense_reimbursement", "reimbursable", "reimbursed"),
        CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
    )

    def __repr__(self):
        return f"<Expense id={self.id} report_id={self.report_id} amount={self.amount}>"


class MileageExpense(Base, TimestampMixin):
    __tablename__ = "mileage_expenses"

    id = Column(Integer, primary_key=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="RESTRICT"), nullable=False, index=True)

    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    distance_km = Column(Numeric(10, 2), nullable=False)
    # snapshot of the vehicle rate when the expense was written
    rate_per_km = Column(Numeric(10, 2), nullable=False)

    expense = relationship("Expense", back_populates="mileage", lazy="noload")
    vehicle = relationship("Vehicle", lazy="selectin")

    __table_args__ = (
        CheckConstraint("distance_km > 0", name="ck_mileage_distance_positive"),
        CheckConstraint("rate_per_km > 0", name="ck_mileage_rate_positive"),
    )

    @property
    def mileage_amount(self):
        return to_decimal(to_decimal(self.distance_km) * to_decimal(self.rate_per_km))

    def __repr__(self):
        return f"<MileageExpense expense_id={self.expense_id} km={self.distance_km}>"
