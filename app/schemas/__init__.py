"""Pydantic schemas package"""
from .payment import (
    ClientRecord,
    PaymentMethodRecord,
    PaymentRecord,
    ReceiptRecord,
    ServiceRecord,
    coerce_payment,
    coerce_receipt,
)

__all__ = [
    "ClientRecord",
    "PaymentMethodRecord",
    "PaymentRecord",
    "ReceiptRecord",
    "ServiceRecord",
    "coerce_payment",
    "coerce_receipt",
]
