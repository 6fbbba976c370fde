# app/services/report_service.py
"""
Reportes de pagos: filtrado por ventana de calendario y totales.

Las ventanas (diaria, semanal, mensual, anual) se alinean al calendario de
la zona horaria de negocio alrededor de una fecha de referencia; no son
ventanas móviles. La semana va de domingo a sábado.
"""

import calendar
import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from ..core.constants import ReportBucket
from ..schemas.payment import coerce_payment
from ..utils.formatters import add_amounts, to_business_time

logger = logging.getLogger(__name__)


class PaymentSummary(BaseModel):
    """Resultado de un reporte: pagos de la ventana y sus totales."""

    bucket: str | None
    reference_date: date
    period_start: date | None
    period_end: date | None
    payments: list[Any]
    total_amount: Decimal
    count: int


def _resolve_bucket(bucket: Any) -> ReportBucket | None:
    if isinstance(bucket, ReportBucket):
        return bucket
    try:
        return ReportBucket(bucket)
    except (ValueError, TypeError):
        return None


def _reference_day(reference_date: date | datetime, tz: tzinfo | str | None) -> date:
    if isinstance(reference_date, datetime):
        return to_business_time(reference_date, tz).date()
    return reference_date


def week_start(day: date) -> date:
    """Domingo en o antes del día dado; nunca antes de date.min."""
    offset = min((day.weekday() + 1) % 7, (day - date.min).days)
    return day - timedelta(days=offset)


def week_end(day: date) -> date:
    """Sábado en o después del día dado; nunca después de date.max."""
    offset = min(6 - (day.weekday() + 1) % 7, (date.max - day).days)
    return day + timedelta(days=offset)


def bucket_bounds(
    bucket: Any, reference_date: date | datetime, tz: tzinfo | str | None = None
) -> tuple[date, date] | None:
    """Primer y último día (inclusive) de la ventana; None si no se reconoce."""
    kind = _resolve_bucket(bucket)
    day = _reference_day(reference_date, tz)
    if kind is ReportBucket.DAILY:
        return day, day
    if kind is ReportBucket.WEEKLY:
        return week_start(day), week_end(day)
    if kind is ReportBucket.MONTHLY:
        last_day = calendar.monthrange(day.year, day.month)[1]
        return day.replace(day=1), day.replace(day=last_day)
    if kind is ReportBucket.YEARLY:
        return date(day.year, 1, 1), date(day.year, 12, 31)
    return None


def filter_by_bucket(
    payments: Iterable[Any],
    bucket: Any,
    reference_date: date | datetime,
    tz: tzinfo | str | None = None,
) -> list[Any]:
    """
    Devuelve los pagos cuya fecha de creación cae en la ventana.

    Args:
        payments: PaymentRecord o dicts con `created_at`
        bucket: ReportBucket o su valor ("daily", "weekly", "monthly", "yearly")
        reference_date: fecha (o datetime) que define la ventana
        tz: zona horaria de negocio; por defecto la configurada

    Un tipo de ventana desconocido devuelve todos los pagos sin filtrar.
    Se conserva el orden de entrada y se devuelven los mismos objetos.
    """
    items = list(payments)
    bounds = bucket_bounds(bucket, reference_date, tz)
    if bounds is None:
        logger.debug(f"Ventana '{bucket}' no reconocida, se devuelve la lista sin filtrar.")
        return items

    start, end = bounds
    selected = []
    for item in items:
        created_at = coerce_payment(item).created_at
        if created_at is None:
            continue
        if start <= to_business_time(created_at, tz).date() <= end:
            selected.append(item)
    return selected


def sum_amounts(payments: Iterable[Any]) -> Decimal:
    """Suma de `total_amount`; los montos ausentes o no numéricos cuentan como 0."""
    return add_amounts(*(coerce_payment(item).total_amount for item in payments))


def count_payments(payments: Sequence[Any]) -> int:
    return len(payments)


def summarize(
    payments: Iterable[Any],
    bucket: Any,
    reference_date: date | datetime,
    tz: tzinfo | str | None = None,
) -> PaymentSummary:
    """Filtra por ventana y calcula total y cantidad."""
    selected = filter_by_bucket(payments, bucket, reference_date, tz)
    bounds = bucket_bounds(bucket, reference_date, tz)
    kind = _resolve_bucket(bucket)
    return PaymentSummary(
        bucket=kind.value if kind else None,
        reference_date=_reference_day(reference_date, tz),
        period_start=bounds[0] if bounds else None,
        period_end=bounds[1] if bounds else None,
        payments=selected,
        total_amount=sum_amounts(selected),
        count=count_payments(selected),
    )
