from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin


class Receipt(Base, TimestampMixin, AuditMixin):
    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)

    stored_name = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    url = Column(String(500), nullable=False)

    expense = relationship("Expense", back_populates="receipts", lazy="noload")

    def __repr__(self):
        return f"<Receipt id={self.id} expense_id={self.expense_id} file={self.stored_name}>"
