from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin


class ActivityLog(Base, TimestampMixin):
    """Append-only trail of who changed what. Rows outlive their users."""

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    actor_email = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False, index=True)
    message = Column(Text, nullable=False)

    __table_args__ = (Index("ix_activity_log_user_created", "user_id", "created_at"),)

    def __repr__(self):
        return f"<ActivityLog id={self.id} code={self.code} actor={self.actor_email}>"
