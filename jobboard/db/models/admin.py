from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from jobboard.db.base import Base

ADMIN_ROLES = ("admin", "superadmin")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    image = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="admin")  # admin | superadmin
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}', role='{self.role}')>"
