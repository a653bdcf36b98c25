from sqlalchemy import Column, Integer, String, Boolean, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, VersionMixin


class Category(Base, TimestampMixin, VersionMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    icon = Column(String(50), nullable=True)
    color = Column(String(7), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    expenses = relationship("Expense", back_populates="category", lazy="noload")

    __table_args__ = (Index("ix_category_active", "is_active"),)

    def __repr__(self):
        return f"<Category id={self.id} name={self.name} active={self.is_active}>"
