# app/models/payment.py
"""
Payment model for receipt payment tracking.
"""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from ..core.constants import PaymentStatus


class Payment(SQLModel, table=True):
    """
    Payment model representing a payment against a receipt.

    Fields:
    - id: UUID primary key
    - receipt_id: Foreign key to receipts table (required)
    - payment_method_id: Foreign key to payment_methods (optional)
    - total_amount: Invoice amount paid (required, >= 0)
    - status: 0 = Pendiente, 1 = Pagado
    - proof_bucket / proof_path: uploaded proof location (opaque)
    - created_at: Registration timestamp (UTC), basis for reports
    """

    __tablename__ = "payments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    receipt_id: uuid.UUID = Field(foreign_key="receipts.id", nullable=False, index=True)
    payment_method_id: uuid.UUID | None = Field(
        default=None, foreign_key="payment_methods.id"
    )
    total_amount: float = Field(nullable=False)
    status: int = Field(default=int(PaymentStatus.PENDING), nullable=False)
    proof_bucket: str | None = Field(default=None)
    proof_path: str | None = Field(default=None)
    created_at: datetime | None = Field(default_factory=datetime.utcnow, index=True)
