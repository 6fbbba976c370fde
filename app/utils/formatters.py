# app/utils/formatters.py
"""
Funciones de formato para pantalla y mensajería.
Ninguna lanza excepciones: ante datos ausentes o malformados devuelven
el texto de relleno (PLACEHOLDER) o una cadena vacía.
"""

import math
import re
from datetime import date, datetime, timezone, tzinfo
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_UP, Decimal, InvalidOperation, Overflow, localcontext
from typing import Any

from ..core.config import get_timezone
from ..core.constants import PLACEHOLDER

MONTH_ABBR = (
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sep", "oct", "nov", "dic",
)

CENTS = Decimal("0.01")

_NON_DIGITS = re.compile(r"\D")


def to_decimal(value: Any) -> Decimal | None:
    """Convierte a Decimal; None si el valor no es un número finito."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return number if number.is_finite() else None


def parse_timestamp(value: Any) -> datetime | None:
    """Acepta datetime, date o texto ISO-8601; None si no se puede interpretar."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def to_business_time(moment: datetime, tz: tzinfo | str | None = None) -> datetime:
    """
    Lleva un datetime a la zona horaria de negocio.
    Los valores sin zona se consideran ya expresados en hora de negocio.
    """
    zone = get_timezone(tz)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def as_utc(moment: datetime | None) -> datetime | None:
    """Marca como UTC los datetime sin zona que vienen de la base de datos."""
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=timezone.utc)


def add_amounts(*amounts: Decimal | None) -> Decimal:
    """Suma exacta de montos; None cuenta como 0."""
    total = Decimal("0")
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        for amount in amounts:
            if amount is not None:
                total += amount
    return total


def format_amount(value: Any) -> str:
    """Formatea un monto en dólares: $1,234.50. PLACEHOLDER si no es numérico."""
    number = to_decimal(value)
    if number is None:
        return PLACEHOLDER
    digits = number.adjusted() + 4
    try:
        with localcontext() as ctx:
            # Precisión y exponente suficientes para los centavos de montos enormes
            ctx.prec = min(MAX_PREC, max(28, digits))
            ctx.Emax = min(MAX_EMAX, max(ctx.Emax, digits))
            rounded = number.quantize(CENTS, rounding=ROUND_HALF_UP)
            sign = "-" if rounded < 0 else ""
            return f"{sign}${rounded.copy_abs():,.2f}"
    except (InvalidOperation, Overflow, ValueError):
        return PLACEHOLDER


def format_date(value: Any, tz: tzinfo | str | None = None) -> str:
    """
    Formatea una fecha como "10 mar 2024, 3:05 p. m." en hora de negocio.

    Args:
        value: datetime, date o texto ISO-8601
        tz: zona horaria; por defecto la configurada (BUSINESS_TIMEZONE)
    """
    moment = parse_timestamp(value)
    if moment is None:
        return PLACEHOLDER
    local = to_business_time(moment, tz)
    hour = local.hour % 12 or 12
    meridiem = "a. m." if local.hour < 12 else "p. m."
    month = MONTH_ABBR[local.month - 1]
    return f"{local.day} {month} {local.year}, {hour}:{local.minute:02d} {meridiem}"


def normalize_phone_for_messaging(phone: Any, dial_code: str = "503") -> str:
    """
    Deja solo dígitos y antepone el código de país cuando corresponde.

    - 8 dígitos que no empiezan con 0: se antepone el código.
    - Ya empieza con el código: sin cambios.
    - Empieza con 0: se quita el 0 y se antepone el código si falta.
    - Cualquier otro caso: los dígitos tal cual (no se garantiza que sea marcable).
    """
    if phone is None:
        return ""
    digits = _NON_DIGITS.sub("", str(phone))
    if not digits:
        return ""
    if len(digits) == 8 and not digits.startswith("0"):
        return f"{dial_code}{digits}"
    if digits.startswith(dial_code):
        return digits
    if digits.startswith("0"):
        rest = digits[1:]
        return rest if rest.startswith(dial_code) else f"{dial_code}{rest}"
    return digits
