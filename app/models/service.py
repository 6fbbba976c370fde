# app/models/service.py
"""
Service model: a bill category (water, electricity, internet).
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Service(SQLModel, table=True):
    """Modelo que representa un servicio cobrable (agua, luz, internet)."""

    __tablename__ = "services"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False, index=True)
    created_at: Optional[datetime] = Field(default_factory=datetime.utcnow)
