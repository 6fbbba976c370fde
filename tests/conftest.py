import os

# Base de datos en memoria antes de importar la aplicación
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("BUSINESS_TIMEZONE", "America/El_Salvador")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import models  # noqa: F401
from app.db.engine_sync import get_sync_session
from app.main import app
from app.models import Client, Payment, PaymentMethod, Receipt, Service


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def api_client(session):
    """API client wired to the test session."""

    def override_session():
        yield session

    app.dependency_overrides[get_sync_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed(session):
    """
    Two clients with their receipts and three payments.

    Timestamps are stored in UTC (naive), as the application writes them.
    In El Salvador time (UTC-6):
    - pago_ana:  10 mar 2024 14:00
    - pago_luis: 10 mar 2024 23:00
    - pago_tarde: 20 mar 2024 12:00
    """
    ana = Client(name="Ana", last_name="Lopez", phone_number="7123-4567")
    luis = Client(name="Luis", last_name="Perez", phone_number=None)
    agua = Service(name="Agua")
    luz = Service(name="Luz")
    efectivo = PaymentMethod(name="Efectivo")
    session.add_all([ana, luis, agua, luz, efectivo])
    session.commit()

    recibo_ana = Receipt(
        client_id=ana.id,
        service_id=agua.id,
        account_receipt_number="A-100",
        created_at=datetime(2024, 1, 1, 12, 0),
    )
    recibo_ana_2 = Receipt(
        client_id=ana.id,
        service_id=agua.id,
        account_receipt_number="A-101",
        created_at=datetime(2024, 2, 1, 12, 0),
    )
    recibo_luis = Receipt(
        client_id=luis.id,
        service_id=luz.id,
        account_receipt_number="L-200",
        created_at=datetime(2023, 12, 1, 12, 0),
    )
    session.add_all([recibo_ana, recibo_ana_2, recibo_luis])
    session.commit()

    pago_ana = Payment(
        receipt_id=recibo_ana.id,
        payment_method_id=efectivo.id,
        total_amount=25,
        created_at=datetime(2024, 3, 10, 20, 0),
    )
    pago_luis = Payment(
        receipt_id=recibo_luis.id,
        total_amount=10.5,
        status=1,
        created_at=datetime(2024, 3, 11, 5, 0),
    )
    pago_tarde = Payment(
        receipt_id=recibo_ana_2.id,
        total_amount=4.5,
        created_at=datetime(2024, 3, 20, 18, 0),
    )
    session.add_all([pago_ana, pago_luis, pago_tarde])
    session.commit()

    return {
        "ana": ana,
        "luis": luis,
        "agua": agua,
        "luz": luz,
        "efectivo": efectivo,
        "recibo_ana": recibo_ana,
        "recibo_ana_2": recibo_ana_2,
        "recibo_luis": recibo_luis,
        "pago_ana": pago_ana,
        "pago_luis": pago_luis,
        "pago_tarde": pago_tarde,
    }
