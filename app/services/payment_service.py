# app/services/payment_service.py
"""
Payment service layer using SQLModel ORM.
Fuente de pagos para los reportes: devuelve registros con el recibo,
cliente, servicio y método de pago ya anidados.
"""
import logging
import uuid
from typing import Any, Dict, List

from sqlmodel import Session, col, select

from ..core.constants import PAYMENT_PROOF_BUCKET, PaymentStatus
from ..models import Client, Payment, PaymentMethod, Receipt, Service
from ..schemas.payment import PaymentRecord
from ..utils.formatters import as_utc, to_decimal
from .receipt_search import receipt_payload

logger = logging.getLogger(__name__)


def _as_uuid(value: Any) -> uuid.UUID | None:
    if not value:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise ValueError(f"Identificador inválido: {value}")


class PaymentService:
    """
    Service layer for Payment operations using SQLModel ORM.
    """

    def __init__(self, session: Session):
        """
        Initialize with a SQLModel session.

        Args:
            session: SQLModel Session instance
        """
        self.session = session

    def _joined_statement(self):
        return (
            select(Payment, Receipt, Client, Service, PaymentMethod)
            .join(Receipt, Payment.receipt_id == Receipt.id, isouter=True)
            .join(Client, Receipt.client_id == Client.id, isouter=True)
            .join(Service, Receipt.service_id == Service.id, isouter=True)
            .join(PaymentMethod, Payment.payment_method_id == PaymentMethod.id, isouter=True)
        )

    @staticmethod
    def _to_record(
        payment: Payment,
        receipt: Receipt | None,
        client: Client | None,
        service: Service | None,
        method: PaymentMethod | None,
    ) -> PaymentRecord:
        data = payment.model_dump()
        data["created_at"] = as_utc(payment.created_at)
        data["receipt"] = receipt_payload(receipt, client, service) if receipt else None
        data["payment_method"] = method.model_dump() if method else None
        return PaymentRecord.model_validate(data)

    def list_payments(self) -> List[PaymentRecord]:
        """All payments with their joins, ordered by most recent first."""
        statement = self._joined_statement().order_by(col(Payment.created_at).desc())
        return [self._to_record(*row) for row in self.session.exec(statement).all()]

    def get_payment(self, payment_id: uuid.UUID) -> PaymentRecord:
        """Get a single payment by ID."""
        row = self.session.exec(self._joined_statement().where(Payment.id == payment_id)).first()
        if not row:
            raise FileNotFoundError(f"Pago {payment_id} no encontrado.")
        return self._to_record(*row)

    def create_payment(self, data: Dict[str, Any]) -> PaymentRecord:
        """
        Registra un pago contra un recibo.

        Args:
            data: receipt_id, total_amount y opcionalmente payment_method_id,
                status, proof_path

        Returns:
            El pago creado como PaymentRecord
        """
        receipt_id = _as_uuid(data.get("receipt_id"))
        if not receipt_id:
            raise ValueError("El recibo es requerido.")
        if not self.session.get(Receipt, receipt_id):
            raise ValueError(f"El recibo {receipt_id} no existe.")

        total_amount = to_decimal(data.get("total_amount"))
        if total_amount is None or total_amount < 0:
            raise ValueError("El monto debe ser cero o mayor.")

        method_id = _as_uuid(data.get("payment_method_id"))
        if method_id and not self.session.get(PaymentMethod, method_id):
            raise ValueError(f"El método de pago {method_id} no existe.")

        status = data.get("status")
        if status is None:
            status = PaymentStatus.PENDING
        try:
            status = PaymentStatus(status)
        except ValueError:
            raise ValueError(f"Estado de pago inválido: {status}")

        proof_path = data.get("proof_path")
        try:
            new_payment = Payment(
                receipt_id=receipt_id,
                payment_method_id=method_id,
                total_amount=float(total_amount),
                status=int(status),
                proof_bucket=PAYMENT_PROOF_BUCKET if proof_path else None,
                proof_path=proof_path,
            )
            self.session.add(new_payment)
            self.session.commit()
            self.session.refresh(new_payment)
        except Exception as e:
            self.session.rollback()
            raise ValueError(f"Database error: {e}")

        logger.info(f"Pago registrado (ID: {new_payment.id}) para el recibo {receipt_id}.")
        return self.get_payment(new_payment.id)
