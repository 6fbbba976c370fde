from decimal import Decimal
from urllib.parse import unquote, urlsplit

import pytest

from app.core.config import VoucherConfig
from app.schemas.payment import PaymentRecord
from app.services.voucher_service import SEPARATOR, build_voucher_link, build_voucher_message
from app.utils.formatters import format_amount

CONFIG = VoucherConfig(
    service_fee=Decimal("1.00"),
    messaging_host="wa.me",
    country_dial_code="503",
    timezone="America/El_Salvador",
)


@pytest.fixture
def payment():
    return {
        "id": "p-1",
        "total_amount": 25,
        "created_at": "2024-03-10T15:05:00",
        "receipt": {
            "account_receipt_number": "A-100",
            "client": {"name": "Ana", "last_name": "Lopez", "phone_number": "71234567"},
            "service": {"name": "Agua"},
        },
    }


def _decoded_text(link):
    return unquote(link.split("?text=", 1)[1])


class TestBuildVoucherMessage:
    def test_exact_text(self, payment):
        message = build_voucher_message(payment, 1, CONFIG)
        assert message.normalized_phone == "50371234567"
        assert message.text.split("\n") == [
            SEPARATOR,
            "COMPROBANTE DE PAGO",
            "Pago: #p-1",
            "Cliente: Ana Lopez",
            "Servicio: Agua (A-100)",
            "Monto factura: $25.00",
            "Comisión por servicio: $1.00",
            "Total: $26.00",
            "Fecha: 10 mar 2024, 3:05 p. m.",
        ]

    def test_deterministic(self, payment):
        assert build_voucher_message(payment, 1, CONFIG) == build_voucher_message(payment, 1, CONFIG)

    def test_default_fee_from_config(self, payment):
        config = CONFIG.model_copy(update={"service_fee": Decimal("2.50")})
        message = build_voucher_message(payment, config=config)
        assert "Comisión por servicio: $2.50" in message.text
        assert "Total: $27.50" in message.text

    def test_plural_join_keys(self, payment):
        receipt = payment.pop("receipt")
        receipt["clients"] = receipt.pop("client")
        receipt["services"] = receipt.pop("service")
        payment["receipts"] = [receipt]
        message = build_voucher_message(payment, 1, CONFIG)
        assert "Cliente: Ana Lopez" in message.text
        assert "Servicio: Agua (A-100)" in message.text

    def test_missing_amount_degrades(self, payment):
        payment["total_amount"] = None
        message = build_voucher_message(payment, 1, CONFIG)
        assert "Monto factura: —" in message.text
        assert "Total: $1.00" in message.text

    def test_accepts_record(self, payment):
        record = PaymentRecord.model_validate(payment)
        assert build_voucher_message(record, 1, CONFIG) == build_voucher_message(payment, 1, CONFIG)

    @pytest.mark.parametrize("phone", ["", None, "   ", "sin número"])
    def test_no_usable_phone_returns_none(self, payment, phone):
        payment["receipt"]["client"]["phone_number"] = phone
        assert build_voucher_message(payment, 1, CONFIG) is None

    def test_no_client_returns_none(self, payment):
        payment["receipt"]["client"] = None
        assert build_voucher_message(payment, 1, CONFIG) is None

    def test_no_receipt_returns_none(self):
        assert build_voucher_message({"id": "p-2", "total_amount": 5}, 1, CONFIG) is None

    def test_integer_ids(self, payment):
        payment["id"] = 42
        payment["receipt"]["id"] = 3
        payment["receipt"]["client"]["id"] = 1
        payment["receipt"]["service"]["id"] = 2
        message = build_voucher_message(payment, 1, CONFIG)
        assert "Pago: #42" in message.text
        assert "Total: $26.00" in message.text

    def test_huge_amount_does_not_raise(self, payment):
        payment["total_amount"] = "1e1000000"
        message = build_voucher_message(payment, 1, CONFIG)
        total_line = message.text.split("\n")[7]
        assert total_line.startswith("Total: $1,000,")
        assert total_line.endswith(",001.00")


class TestBuildVoucherLink:
    def test_link_targets_normalized_phone(self, payment):
        link = build_voucher_link(payment, 1, CONFIG)
        parts = urlsplit(link)
        assert parts.scheme == "https"
        assert parts.netloc == "wa.me"
        assert parts.path == "/50371234567"
        assert "Total: " + format_amount(26) in _decoded_text(link)

    def test_text_round_trips(self, payment):
        message = build_voucher_message(payment, 1, CONFIG)
        link = build_voucher_link(payment, 1, CONFIG)
        assert _decoded_text(link) == message.text

    def test_strict_encoding(self, payment):
        encoded = build_voucher_link(payment, 1, CONFIG).split("?text=", 1)[1]
        for raw in ("\n", " ", "#", "$", "(", ")", ":", ",", "·"):
            assert raw not in encoded
        assert "%0A" in encoded

    def test_integer_id_payment_gets_link(self, payment):
        payment["id"] = 7
        link = build_voucher_link(payment, 1, CONFIG)
        assert link.startswith("https://wa.me/50371234567?text=")
        assert "Pago: #7" in _decoded_text(link)

    def test_empty_phone_returns_none(self, payment):
        payment["receipt"]["client"]["phone_number"] = ""
        assert build_voucher_link(payment, 1, CONFIG) is None

    def test_custom_host(self, payment):
        config = CONFIG.model_copy(update={"messaging_host": "api.whatsapp.com/send"})
        link = build_voucher_link(payment, 1, config)
        assert link.startswith("https://api.whatsapp.com/send/50371234567?text=")
