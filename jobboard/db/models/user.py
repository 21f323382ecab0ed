from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    image = Column(String, nullable=False)
    resume = Column(String, nullable=False, default="")

    # Email verification; otp fields are cleared once verified
    is_email_verified = Column(Boolean, nullable=False, default=False)
    otp = Column(String(6), nullable=True)
    otp_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    applications = relationship("JobApplication", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
