# app/utils/receipt_label.py
"""
Etiquetas legibles para recibos: "Ana Lopez · Agua (A-100)".
"""

from typing import Any

from ..core.constants import PLACEHOLDER
from ..schemas.payment import ClientRecord, ServiceRecord, coerce_payment, coerce_receipt


def client_display_name(client: ClientRecord | None) -> str:
    """Nombre y apellido del cliente; PLACEHOLDER si ambos están vacíos."""
    if client is None:
        return PLACEHOLDER
    parts = [(part or "").strip() for part in (client.name, client.last_name)]
    display = " ".join(part for part in parts if part)
    return display or PLACEHOLDER


def service_display_name(service: ServiceRecord | None) -> str:
    """Nombre del servicio tal cual; PLACEHOLDER solo si falta el servicio o su nombre."""
    if service is None or service.name is None:
        return PLACEHOLDER
    return service.name


def account_suffix(account_number: str | None) -> str:
    """ " (A-100)" o cadena vacía si no hay número de cuenta."""
    return f" ({account_number})" if account_number else ""


def describe_receipt(receipt: Any) -> str:
    """
    Etiqueta de un recibo: cliente · servicio (cuenta).

    Acepta un ReceiptRecord o un dict con las relaciones anidadas en
    singular o plural. Un recibo ausente produce una cadena vacía.
    """
    record = coerce_receipt(receipt)
    if record is None:
        return ""
    return (
        f"{client_display_name(record.client)} · "
        f"{service_display_name(record.service)}"
        f"{account_suffix(record.account_receipt_number)}"
    )


def describe_payment_receipt(payment: Any) -> str:
    """Etiqueta del recibo asociado a un pago."""
    return describe_receipt(coerce_payment(payment).receipt)
