# app/models/client.py
"""
Client model for bill-collection customers.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Client(SQLModel, table=True):
    """
    Client model representing customers whose bills are collected.

    Fields:
    - id: UUID primary key
    - name: First name (required)
    - last_name: Last name (required)
    - phone_number: Contact phone, free-form (used for vouchers)
    - reference: Free-form reference (address hint, who referred them, etc.)
    - created_at: Registration timestamp (UTC)
    """

    __tablename__ = "clients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False, index=True)
    last_name: str = Field(nullable=False, index=True)
    phone_number: Optional[str] = Field(default=None)
    reference: Optional[str] = Field(default=None)
    created_at: Optional[datetime] = Field(default_factory=datetime.utcnow)
