"""Base Models and Mixins"""

import uuid
from sqlalchemy import Column, DateTime, Uuid

from app.database import Base
from app.utils.time import get_utc_now


class TimestampMixin:
    """
    Mixin for audit timestamps.

    Provides:
    - created_at timestamp (set once on insert)
    - updated_at timestamp (refreshed on every UPDATE)
    """
    created_at = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class BaseModel(Base, TimestampMixin):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at / updated_at timestamps
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
