# app/schemas/payment.py
"""
Registros canónicos que consume la capa de reportes.

Las consultas con joins devuelven las relaciones anidadas con claves en
singular (``receipt``, ``client``) o en plural (``receipts``, ``clients``)
según la forma de la consulta. Aquí se normalizan ambas formas a una sola
estructura antes de llegar a la lógica de negocio. Los valores malformados
se degradan a ``None`` en lugar de producir errores.
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError, model_validator

from ..core.constants import PLACEHOLDER, PaymentStatus
from ..utils.formatters import parse_timestamp, to_decimal

logger = logging.getLogger(__name__)


def pick_joined(data: Mapping, singular: str, plural: str | None = None) -> Any:
    """Devuelve la relación anidada; la clave en singular tiene prioridad."""
    plural = plural or f"{singular}s"
    for key in (singular, plural):
        value = data.get(key)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


Text = Annotated[str | None, BeforeValidator(_as_text)]


def _as_identifier(value: Any) -> Any:
    # Identidad opaca: UUID, entero o texto se guardan como texto
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (uuid.UUID, int, str)):
        return str(value)
    return None


Identifier = Annotated[str | None, BeforeValidator(_as_identifier)]


def _as_join(value: Any) -> Any:
    # Descarta relaciones que no tienen forma de registro
    if value is None or isinstance(value, (Mapping, BaseModel)):
        return value
    return None


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class ClientRecord(_Record):
    id: Identifier = None
    name: Text = None
    last_name: Text = None
    phone_number: Text = None
    reference: Text = None


class ServiceRecord(_Record):
    id: Identifier = None
    name: Text = None


class PaymentMethodRecord(_Record):
    id: Identifier = None
    name: Text = None


class ReceiptRecord(_Record):
    id: Identifier = None
    account_receipt_number: Text = None
    client: ClientRecord | None = None
    service: ServiceRecord | None = None
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_joins(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = {k: v for k, v in data.items() if k not in ("clients", "services")}
        normalized["client"] = _as_join(pick_joined(data, "client"))
        normalized["service"] = _as_join(pick_joined(data, "service"))
        normalized["account_receipt_number"] = _as_text(data.get("account_receipt_number"))
        normalized["created_at"] = parse_timestamp(data.get("created_at"))
        return normalized


class PaymentRecord(_Record):
    id: Identifier = None
    receipt_id: Identifier = None
    payment_method_id: Identifier = None
    total_amount: Decimal | None = None
    status: int = int(PaymentStatus.PENDING)
    proof_bucket: Text = None
    proof_path: Text = None
    created_at: datetime | None = None
    receipt: ReceiptRecord | None = None
    payment_method: PaymentMethodRecord | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_joins(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = {
            k: v for k, v in data.items() if k not in ("receipts", "payment_methods")
        }
        normalized["receipt"] = _as_join(pick_joined(data, "receipt"))
        normalized["payment_method"] = _as_join(pick_joined(data, "payment_method"))
        normalized["total_amount"] = to_decimal(data.get("total_amount"))
        normalized["created_at"] = parse_timestamp(data.get("created_at"))
        status = data.get("status")
        if not isinstance(status, int) or isinstance(status, bool):
            status = int(PaymentStatus.PENDING)
        normalized["status"] = status
        return normalized

    @property
    def client(self) -> ClientRecord | None:
        return self.receipt.client if self.receipt else None

    @property
    def status_label(self) -> str:
        try:
            return PaymentStatus(self.status).label
        except ValueError:
            return PLACEHOLDER


def _validate_leniently(model: type[_Record], item: Mapping) -> _Record | None:
    """
    Valida un mapping; si algún campo falla se descarta solo ese campo
    (y su variante en plural) y se vuelve a intentar una vez.
    """
    try:
        return model.model_validate(item)
    except ValidationError as e:
        broken = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        logger.debug(f"{model.__name__}: se descartan campos inválidos {sorted(broken)}: {e}")
    dropped = broken | {f"{key}s" for key in broken}
    cleaned = {k: v for k, v in item.items() if k not in dropped}
    try:
        return model.model_validate(cleaned)
    except ValidationError as e:
        logger.debug(f"{model.__name__} con forma inválida, se ignora: {e}")
        return None


def coerce_receipt(item: Any) -> ReceiptRecord | None:
    """Normaliza un recibo (registro, mapping o None) sin lanzar excepciones."""
    if item is None or isinstance(item, ReceiptRecord):
        return item
    if not isinstance(item, Mapping):
        return None
    return _validate_leniently(ReceiptRecord, item)


def coerce_payment(item: Any) -> PaymentRecord:
    """Normaliza un pago (registro o mapping); lo irreconocible queda vacío."""
    if isinstance(item, PaymentRecord):
        return item
    if isinstance(item, Mapping):
        record = _validate_leniently(PaymentRecord, item)
        if record is not None:
            return record
    return PaymentRecord()
