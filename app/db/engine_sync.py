# app/db/engine_sync.py
"""
MOTOR SÍNCRONO - Para toda la aplicación.
La URL sale de la configuración (DATABASE_URL); por defecto SQLite en data/db/.
Con SQLite se activa WAL mode para mejorar concurrencia.
"""
import os
from typing import Generator

from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from ..core.config import get_settings

DATABASE_URL = get_settings().database_url

_is_sqlite = DATABASE_URL.startswith("sqlite")

if DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
    _db_file = DATABASE_URL.split("sqlite:///", 1)[-1]
    os.makedirs(os.path.dirname(os.path.abspath(_db_file)), exist_ok=True)

_connect_args = {"check_same_thread": False} if _is_sqlite else {}

sync_engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)


if _is_sqlite:
    # Activar WAL mode para evitar "database is locked"
    @event.listens_for(sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()


def get_sync_session() -> Generator[Session, None, None]:
    """
    Dependency for SYNC SQLModel session injection.
    """
    with Session(sync_engine) as session:
        yield session


def create_sync_db_and_tables():
    """
    Create all tables with SYNC engine.
    """
    from .. import models  # noqa: F401  registra las tablas en el metadata

    SQLModel.metadata.create_all(sync_engine)
