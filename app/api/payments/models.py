import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from ...core.constants import PaymentStatus


# --- Modelos Pydantic (Pagos) ---
class PaymentCreate(BaseModel):
    receipt_id: uuid.UUID
    total_amount: Decimal
    payment_method_id: uuid.UUID | None = None
    status: PaymentStatus = PaymentStatus.PENDING
    proof_path: str | None = None


class PaymentRow(BaseModel):
    id: str
    receipt_id: str | None = None
    receipt_label: str
    client_name: str
    total_amount: Decimal | None = None
    amount_display: str
    status: int
    status_label: str
    payment_method: str | None = None
    created_at: datetime | None = None
    created_at_display: str
    voucher_link: str | None = None


# --- Modelos Pydantic (Reportes) ---
class PaymentReport(BaseModel):
    bucket: str | None = None
    reference_date: date
    period_start: date | None = None
    period_end: date | None = None
    total_amount: Decimal
    total_display: str
    count: int


class PaymentListResponse(BaseModel):
    payments: list[PaymentRow]
    summary: PaymentReport


class VoucherResponse(BaseModel):
    text: str | None = None
    phone: str | None = None
    link: str | None = None
    reason: str | None = None


# --- Modelos Pydantic (Recibos) ---
class ReceiptOption(BaseModel):
    id: str
    account_receipt_number: str | None = None
    label: str
