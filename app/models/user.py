"""User & Authentication Model"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class User(BaseModel):
    """
    Account holder. Every bill is owned by exactly one user; the user's id
    is the owner scope for all bill reads and writes.
    """
    __tablename__ = "users"

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255), nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    bills = relationship("Bill", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
