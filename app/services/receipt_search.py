# app/services/receipt_search.py
"""
Búsqueda de recibos por texto libre (nombre o apellido del cliente,
nombre del servicio o número de cuenta) y búsqueda diferida para el
formulario de registro de pagos.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, or_, select

from ..core.config import SearchConfig, get_settings
from ..models import Client, Receipt, Service
from ..schemas.payment import ReceiptRecord
from ..utils.formatters import as_utc

logger = logging.getLogger(__name__)


def receipt_payload(
    receipt: Receipt, client: Client | None, service: Service | None
) -> dict[str, Any]:
    """Recibo con cliente y servicio anidados, listo para ReceiptRecord."""
    payload = receipt.model_dump()
    payload["created_at"] = as_utc(receipt.created_at)
    payload["client"] = client.model_dump() if client else None
    payload["service"] = service.model_dump() if service else None
    return payload


class ReceiptSearchService:
    """
    Búsqueda de recibos sobre la base de datos.
    """

    def __init__(self, session: Session, config: SearchConfig | None = None):
        """
        Args:
            session: SQLModel Session instance
            config: límites de la búsqueda; por defecto los configurados
        """
        self.session = session
        self.config = config or get_settings().search

    def search(self, query: str | None) -> list[ReceiptRecord]:
        """
        Recibos que coinciden (sin distinguir mayúsculas) con el texto,
        del más reciente al más antiguo. Un error de base de datos se
        trata como cero coincidencias.
        """
        q = (query or "").strip()
        if len(q) < self.config.min_length:
            return []

        pattern = f"%{q}%"
        try:
            client_ids = self.session.exec(
                select(Client.id)
                .where(or_(col(Client.name).ilike(pattern), col(Client.last_name).ilike(pattern)))
                .limit(self.config.client_match_limit)
            ).all()
            service_ids = self.session.exec(
                select(Service.id)
                .where(col(Service.name).ilike(pattern))
                .limit(self.config.service_match_limit)
            ).all()

            conditions = [col(Receipt.account_receipt_number).ilike(pattern)]
            if client_ids:
                conditions.append(col(Receipt.client_id).in_(client_ids))
            if service_ids:
                conditions.append(col(Receipt.service_id).in_(service_ids))

            statement = (
                select(Receipt, Client, Service)
                .join(Client, Receipt.client_id == Client.id, isouter=True)
                .join(Service, Receipt.service_id == Service.id, isouter=True)
                .where(or_(*conditions))
                .order_by(col(Receipt.created_at).desc())
                .limit(self.config.limit)
            )
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            logger.error(f"Error buscando recibos con '{q}': {e}", exc_info=True)
            return []

        return [
            ReceiptRecord.model_validate(receipt_payload(receipt, client, service))
            for receipt, client, service in rows
        ]


class SearchHandle:
    """
    Búsqueda programada. cancel() es advertencia: el resultado se descarta
    aunque la consulta ya esté en curso.
    """

    def __init__(self, query: str):
        self.query = query
        self._task: asyncio.Task | None = None
        self._cancelled = False

    def attach(self, task: asyncio.Task):
        self._task = task

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def result(self) -> list[ReceiptRecord] | None:
        """Resultados de la búsqueda, o None si fue reemplazada o cancelada."""
        if self._task is None:
            return None
        await asyncio.wait({self._task})
        if self._task.cancelled():
            return None
        return self._task.result()


class DebouncedReceiptSearch:
    """
    Ejecuta la búsqueda después de un periodo sin cambios en el texto.

    Cada submit() cancela la búsqueda anterior; solo se entrega el
    resultado de la última consulta enviada (la última gana).
    """

    def __init__(
        self,
        search: Callable[[str], Any],
        config: SearchConfig | None = None,
        on_results: Callable[[list[ReceiptRecord]], None] | None = None,
    ):
        """
        Args:
            search: función (síncrona o async) que recibe el texto y devuelve
                recibos. Las síncronas corren en un hilo aparte, así que deben
                abrir su propia sesión.
            config: ventana de espera y longitud mínima
            on_results: callback con los resultados vigentes
        """
        self._search = search
        self.config = config or get_settings().search
        self.on_results = on_results
        self._current: SearchHandle | None = None

    @property
    def current(self) -> SearchHandle | None:
        return self._current

    def submit(self, query: str | None) -> SearchHandle | None:
        """
        Programa una búsqueda. Debe llamarse con un event loop activo.
        Un texto más corto que el mínimo cancela lo pendiente, entrega
        una lista vacía y devuelve None.
        """
        self.cancel()
        q = (query or "").strip()
        if len(q) < self.config.min_length:
            self._deliver([])
            return None

        handle = SearchHandle(q)
        self._current = handle
        handle.attach(asyncio.get_running_loop().create_task(self._run(handle)))
        return handle

    def cancel(self):
        if self._current is not None:
            self._current.cancel()
            self._current = None

    def _is_stale(self, handle: SearchHandle) -> bool:
        return handle.cancelled or handle is not self._current

    async def _call_search(self, query: str) -> list[ReceiptRecord]:
        if inspect.iscoroutinefunction(self._search):
            return await self._search(query)
        return await asyncio.to_thread(self._search, query)

    async def _run(self, handle: SearchHandle) -> list[ReceiptRecord] | None:
        await asyncio.sleep(self.config.debounce_seconds)
        if self._is_stale(handle):
            return None

        try:
            results = list(await self._call_search(handle.query) or [])
        except Exception as e:
            logger.error(f"Error en la búsqueda de recibos '{handle.query}': {e}", exc_info=True)
            results = []

        if self._is_stale(handle):
            logger.debug(f"Resultado descartado para '{handle.query}' (consulta reemplazada).")
            return None

        self._deliver(results)
        return results

    def _deliver(self, results: list[ReceiptRecord]):
        if self.on_results is not None:
            self.on_results(results)


def search_receipts(query: str | None) -> list[ReceiptRecord]:
    """Búsqueda con sesión propia, apta para DebouncedReceiptSearch."""
    from ..db.engine_sync import sync_engine

    with Session(sync_engine) as session:
        return ReceiptSearchService(session).search(query)
