# app/models/receipt.py
"""
Receipt model: a client's account with one service provider.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Receipt(SQLModel, table=True):
    """
    Cuenta de un cliente con un servicio.

    Un mismo par (cliente, servicio) puede tener varios recibos
    (varias cuentas con el mismo proveedor).
    """

    __tablename__ = "receipts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    client_id: uuid.UUID = Field(foreign_key="clients.id", nullable=False, index=True)
    service_id: uuid.UUID = Field(foreign_key="services.id", nullable=False, index=True)
    account_receipt_number: str = Field(nullable=False, index=True)
    created_at: Optional[datetime] = Field(default_factory=datetime.utcnow)
