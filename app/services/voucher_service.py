# app/services/voucher_service.py
"""
Comprobante de pago en texto plano y enlace de mensajería para enviarlo.

El texto es determinista: solo depende del pago (incluida su fecha de
creación), de la comisión y de la configuración. Nunca se consulta la hora
actual.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from urllib.parse import quote

from ..core.config import VoucherConfig, get_settings
from ..core.constants import PLACEHOLDER
from ..schemas.payment import coerce_payment
from ..utils.formatters import (
    add_amounts,
    format_amount,
    format_date,
    normalize_phone_for_messaging,
    to_decimal,
)
from ..utils.receipt_label import account_suffix, client_display_name, service_display_name

logger = logging.getLogger(__name__)

SEPARATOR = "━" * 24
TITLE = "COMPROBANTE DE PAGO"


@dataclass(frozen=True)
class VoucherMessage:
    text: str
    normalized_phone: str


def _resolve_fee(service_fee: Any, config: VoucherConfig) -> Decimal:
    fee = to_decimal(service_fee) if service_fee is not None else None
    return fee if fee is not None else config.service_fee


def build_voucher_message(
    payment: Any,
    service_fee: Any = None,
    config: VoucherConfig | None = None,
) -> VoucherMessage | None:
    """
    Arma el comprobante de un pago.

    Args:
        payment: PaymentRecord o dict con el recibo, cliente y servicio anidados
        service_fee: comisión a sumar; por defecto la configurada (SERVICE_FEE)
        config: configuración de mensajería; por defecto la de la aplicación

    Returns:
        VoucherMessage con el texto y el teléfono normalizado, o None si el
        cliente no tiene un teléfono utilizable.
    """
    config = config or get_settings().voucher
    record = coerce_payment(payment)
    receipt = record.receipt
    client = record.client

    phone = normalize_phone_for_messaging(
        client.phone_number if client else None, config.country_dial_code
    )
    if not phone:
        logger.debug(f"Pago {record.id}: el cliente no tiene teléfono utilizable.")
        return None

    fee = _resolve_fee(service_fee, config)
    amount = record.total_amount
    total = add_amounts(amount, fee)

    service_line = PLACEHOLDER
    if receipt is not None:
        service_line = (
            f"{service_display_name(receipt.service)}"
            f"{account_suffix(receipt.account_receipt_number)}"
        )

    lines = [
        SEPARATOR,
        TITLE,
        f"Pago: #{record.id if record.id is not None else PLACEHOLDER}",
        f"Cliente: {client_display_name(client)}",
        f"Servicio: {service_line}",
        f"Monto factura: {format_amount(amount)}",
        f"Comisión por servicio: {format_amount(fee)}",
        f"Total: {format_amount(total)}",
        f"Fecha: {format_date(record.created_at, config.timezone)}",
    ]
    return VoucherMessage(text="\n".join(lines), normalized_phone=phone)


def build_voucher_link(
    payment: Any,
    service_fee: Any = None,
    config: VoucherConfig | None = None,
) -> str | None:
    """Enlace https://<host>/<teléfono>?text=<comprobante codificado>, o None."""
    config = config or get_settings().voucher
    message = build_voucher_message(payment, service_fee, config)
    if message is None:
        return None
    encoded = quote(message.text, safe="")
    return f"https://{config.messaging_host}/{message.normalized_phone}?text={encoded}"
