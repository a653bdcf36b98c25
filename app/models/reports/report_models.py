from decimal import Decimal

from sqlalchemy import Column, Integer, String, Date, Numeric, Enum, Text, CheckConstraint, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin, VersionMixin
from app.models.enums.report_status import ReportStatus


class Report(Base, TimestampMixin, AuditMixin, VersionMixin):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    destination = Column(String(255), nullable=True)
    purpose = Column(String(255), nullable=True)
    status = Column(Enum(ReportStatus), nullable=False, default=ReportStatus.in_progress, index=True)
    client = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    advance = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))

    expenses = relationship(
        "Expense",
        back_populates="report",
        lazy="selectin",
        order_by="Expense.expense_date.desc()",
    )

    __table_args__ = (
        Index("ix_report_status_dates", "status", "start_date"),
        CheckConstraint("end_date >= start_date", name="ck_report_date_range"),
        CheckConstraint("advance >= 0", name="ck_report_advance_non_negative"),
    )

    def __repr__(self):
        return f"<Report id={self.id} title={self.title} status={self.status}>"
