from sqlalchemy import Column, Integer, String, Boolean, DateTime
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, VersionMixin


class User(Base, TimestampMixin, VersionMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(50), nullable=False, default="user")
    is_active = Column(Boolean, default=True, nullable=False)
    token_version = Column(Integer, nullable=False, default=0)
    last_login = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
