import uuid
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ...core.config import Settings, get_settings
from ...db.engine_sync import get_sync_session
from ...schemas.payment import PaymentRecord
from ...services.payment_service import PaymentService
from ...services.receipt_search import ReceiptSearchService
from ...services.report_service import summarize
from ...services.voucher_service import build_voucher_link, build_voucher_message
from ...utils.formatters import format_amount, format_date
from ...utils.receipt_label import client_display_name, describe_receipt
from .models import (
    PaymentCreate,
    PaymentListResponse,
    PaymentReport,
    PaymentRow,
    ReceiptOption,
    VoucherResponse,
)

router = APIRouter()


# --- Dependency Injectors ---
def get_payment_service(session: Session = Depends(get_sync_session)) -> PaymentService:
    return PaymentService(session)


def get_receipt_search_service(
    session: Session = Depends(get_sync_session),
    settings: Settings = Depends(get_settings),
) -> ReceiptSearchService:
    return ReceiptSearchService(session, settings.search)


def _to_row(record: PaymentRecord, settings: Settings) -> PaymentRow:
    return PaymentRow(
        id=str(record.id),
        receipt_id=str(record.receipt_id) if record.receipt_id else None,
        receipt_label=describe_receipt(record.receipt),
        client_name=client_display_name(record.client),
        total_amount=record.total_amount,
        amount_display=format_amount(record.total_amount),
        status=record.status,
        status_label=record.status_label,
        payment_method=record.payment_method.name if record.payment_method else None,
        created_at=record.created_at,
        created_at_display=format_date(record.created_at, settings.timezone),
        voucher_link=build_voucher_link(record, config=settings.voucher),
    )


# --- Payment Endpoints ---


@router.get("/payments", response_model=PaymentListResponse)
def api_list_payments(
    bucket: str | None = None,
    reference_date: date | None = None,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """
    Lista los pagos (más recientes primero) filtrados por ventana de calendario.
    Sin `bucket`, o con uno desconocido, se devuelven todos.
    """
    reference = reference_date or datetime.now(settings.timezone).date()
    report = summarize(service.list_payments(), bucket, reference, settings.timezone)
    return PaymentListResponse(
        payments=[_to_row(record, settings) for record in report.payments],
        summary=PaymentReport(
            bucket=report.bucket,
            reference_date=report.reference_date,
            period_start=report.period_start,
            period_end=report.period_end,
            total_amount=report.total_amount,
            total_display=format_amount(report.total_amount),
            count=report.count,
        ),
    )


@router.post("/payments", response_model=PaymentRow, status_code=status.HTTP_201_CREATED)
def api_create_payment(
    payment: PaymentCreate,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    try:
        new_payment = service.create_payment(payment.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_row(new_payment, settings)


@router.get("/payments/{payment_id}/voucher", response_model=VoucherResponse)
def api_get_payment_voucher(
    payment_id: uuid.UUID,
    service_fee: Decimal | None = None,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    try:
        record = service.get_payment(payment_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    message = build_voucher_message(record, service_fee, settings.voucher)
    if message is None:
        return VoucherResponse(reason="El cliente no tiene un número de teléfono válido.")
    return VoucherResponse(
        text=message.text,
        phone=message.normalized_phone,
        link=build_voucher_link(record, service_fee, settings.voucher),
    )


# --- Receipt Endpoints ---


@router.get("/receipts/search", response_model=list[ReceiptOption])
def api_search_receipts(
    q: str = "",
    search: ReceiptSearchService = Depends(get_receipt_search_service),
):
    return [
        ReceiptOption(
            id=str(receipt.id),
            account_receipt_number=receipt.account_receipt_number,
            label=describe_receipt(receipt),
        )
        for receipt in search.search(q)
    ]
