"""
Constantes centralizadas para el sistema.
Elimina "magic strings" y provee tipado fuerte para valores comunes.
"""

from enum import Enum, IntEnum, unique

# Texto de relleno para valores ausentes o inválidos en pantalla.
PLACEHOLDER = "—"

PAYMENT_PROOF_BUCKET = "payment-proofs"


@unique
class PaymentStatus(IntEnum):
    """Estados de un pago."""

    PENDING = 0
    PAID = 1

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    PaymentStatus.PENDING: "Pendiente",
    PaymentStatus.PAID: "Pagado",
}


@unique
class ReportBucket(str, Enum):
    """Ventanas de calendario para reportes de pagos."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
