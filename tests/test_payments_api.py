import uuid
from urllib.parse import unquote

import pytest


def _list(api_client, bucket, reference_date):
    return api_client.get(
        "/api/payments", params={"bucket": bucket, "reference_date": reference_date}
    )


class TestListPayments:
    """GET /api/payments"""

    def test_daily_uses_business_timezone(self, api_client, seed):
        response = _list(api_client, "daily", "2024-03-10")
        assert response.status_code == 200
        data = response.json()

        # Más recientes primero; el pago de las 05:00 UTC del 11 cae el 10 en hora local
        expected = [str(seed["pago_luis"].id), str(seed["pago_ana"].id)]
        assert [p["id"] for p in data["payments"]] == expected
        assert data["summary"]["count"] == 2
        assert data["summary"]["total_display"] == "$35.50"
        assert data["summary"]["period_start"] == "2024-03-10"
        assert data["summary"]["period_end"] == "2024-03-10"

    def test_rows_are_formatted(self, api_client, seed):
        response = _list(api_client, "daily", "2024-03-10")
        rows = {row["id"]: row for row in response.json()["payments"]}

        ana = rows[str(seed["pago_ana"].id)]
        assert ana["receipt_label"] == "Ana Lopez · Agua (A-100)"
        assert ana["client_name"] == "Ana Lopez"
        assert ana["amount_display"] == "$25.00"
        assert ana["status_label"] == "Pendiente"
        assert ana["payment_method"] == "Efectivo"
        assert ana["created_at_display"] == "10 mar 2024, 2:00 p. m."
        assert ana["voucher_link"].startswith("https://wa.me/50371234567?text=")

        luis = rows[str(seed["pago_luis"].id)]
        assert luis["status_label"] == "Pagado"
        assert luis["voucher_link"] is None

    def test_weekly(self, api_client, seed):
        response = _list(api_client, "weekly", "2024-03-13")
        data = response.json()
        assert data["summary"]["count"] == 2
        assert data["summary"]["period_start"] == "2024-03-10"
        assert data["summary"]["period_end"] == "2024-03-16"

    def test_monthly(self, api_client, seed):
        response = _list(api_client, "monthly", "2024-03-01")
        data = response.json()
        assert data["summary"]["count"] == 3
        assert data["summary"]["total_display"] == "$40.00"
        assert data["payments"][0]["id"] == str(seed["pago_tarde"].id)

    @pytest.mark.parametrize("params", [{}, {"bucket": "quarterly", "reference_date": "2020-01-01"}])
    def test_without_or_unknown_bucket_lists_everything(self, api_client, seed, params):
        data = api_client.get("/api/payments", params=params).json()
        assert data["summary"]["count"] == 3
        assert data["summary"]["bucket"] is None

    def test_empty(self, api_client):
        data = api_client.get("/api/payments", params={"bucket": "daily"}).json()
        assert data["payments"] == []
        assert data["summary"]["count"] == 0
        assert data["summary"]["total_display"] == "$0.00"


class TestCreatePayment:
    """POST /api/payments"""

    def test_create(self, api_client, seed):
        payload = {
            "receipt_id": str(seed["recibo_ana"].id),
            "total_amount": "12.75",
            "payment_method_id": str(seed["efectivo"].id),
        }
        response = api_client.post("/api/payments", json=payload)
        assert response.status_code == 201
        row = response.json()
        assert row["receipt_label"] == "Ana Lopez · Agua (A-100)"
        assert row["amount_display"] == "$12.75"
        assert row["status_label"] == "Pendiente"
        assert row["payment_method"] == "Efectivo"

        listed = api_client.get("/api/payments").json()
        assert listed["summary"]["count"] == 4
        assert listed["payments"][0]["id"] == row["id"]

    def test_zero_amount_is_allowed(self, api_client, seed):
        payload = {"receipt_id": str(seed["recibo_luis"].id), "total_amount": 0, "status": 1}
        response = api_client.post("/api/payments", json=payload)
        assert response.status_code == 201
        assert response.json()["status_label"] == "Pagado"

    def test_negative_amount(self, api_client, seed):
        payload = {"receipt_id": str(seed["recibo_ana"].id), "total_amount": -1}
        response = api_client.post("/api/payments", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "El monto debe ser cero o mayor."

    def test_unknown_receipt(self, api_client, seed):
        payload = {"receipt_id": str(uuid.uuid4()), "total_amount": 5}
        response = api_client.post("/api/payments", json=payload)
        assert response.status_code == 400

    def test_unknown_payment_method(self, api_client, seed):
        payload = {
            "receipt_id": str(seed["recibo_ana"].id),
            "total_amount": 5,
            "payment_method_id": str(uuid.uuid4()),
        }
        assert api_client.post("/api/payments", json=payload).status_code == 400


class TestVoucher:
    """GET /api/payments/{id}/voucher"""

    def test_voucher(self, api_client, seed):
        response = api_client.get(f"/api/payments/{seed['pago_ana'].id}/voucher")
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "50371234567"
        assert "Total: $26.00" in data["text"]
        assert "Fecha: 10 mar 2024, 2:00 p. m." in data["text"]
        assert unquote(data["link"].split("?text=", 1)[1]) == data["text"]
        assert data["reason"] is None

    def test_custom_fee(self, api_client, seed):
        response = api_client.get(
            f"/api/payments/{seed['pago_ana'].id}/voucher", params={"service_fee": "0.50"}
        )
        assert "Total: $25.50" in response.json()["text"]

    def test_client_without_phone(self, api_client, seed):
        response = api_client.get(f"/api/payments/{seed['pago_luis'].id}/voucher")
        assert response.status_code == 200
        data = response.json()
        assert data["link"] is None
        assert data["text"] is None
        assert data["reason"]

    def test_unknown_payment(self, api_client, seed):
        response = api_client.get(f"/api/payments/{uuid.uuid4()}/voucher")
        assert response.status_code == 404


class TestReceiptSearchEndpoint:
    """GET /api/receipts/search"""

    def test_search(self, api_client, seed):
        response = api_client.get("/api/receipts/search", params={"q": "lopez"})
        assert response.status_code == 200
        assert [r["label"] for r in response.json()] == [
            "Ana Lopez · Agua (A-101)",
            "Ana Lopez · Agua (A-100)",
        ]

    def test_short_query(self, api_client, seed):
        assert api_client.get("/api/receipts/search", params={"q": "l"}).json() == []


def test_health(api_client):
    data = api_client.get("/health").json()
    assert data["status"] == "ok"
    assert data["timezone"] == "America/El_Salvador"
