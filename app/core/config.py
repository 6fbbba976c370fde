# app/core/config.py
"""
Configuración de la aplicación.
Se lee de variables de entorno (y del archivo .env) mediante pydantic-settings.
Los componentes reciben sub-configuraciones explícitas para que los tests
puedan sobreescribir los valores sin tocar el entorno.
"""

import os
from decimal import Decimal
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEZONE = "America/El_Salvador"

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "data")
DEFAULT_DATABASE_FILE = os.path.join(DATA_DIR, "db", "cobros.sqlite")


class SearchConfig(BaseModel):
    """Parámetros de la búsqueda de recibos."""

    debounce_ms: int = 300
    min_length: int = 2
    limit: int = 25
    client_match_limit: int = 50
    service_match_limit: int = 20

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


class VoucherConfig(BaseModel):
    """Parámetros del comprobante enviado por mensajería."""

    service_fee: Decimal = Decimal("1.00")
    messaging_host: str = "wa.me"
    country_dial_code: str = "503"
    timezone: str = DEFAULT_TIMEZONE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"
    database_url: str = f"sqlite:///{DEFAULT_DATABASE_FILE}"

    business_timezone: str = DEFAULT_TIMEZONE

    service_fee: Decimal = Decimal("1.00")
    messaging_host: str = "wa.me"
    country_dial_code: str = "503"

    search_debounce_ms: int = 300
    search_min_length: int = 2
    search_limit: int = 25

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)

    @property
    def search(self) -> SearchConfig:
        return SearchConfig(
            debounce_ms=self.search_debounce_ms,
            min_length=self.search_min_length,
            limit=self.search_limit,
        )

    @property
    def voucher(self) -> VoucherConfig:
        return VoucherConfig(
            service_fee=self.service_fee,
            messaging_host=self.messaging_host,
            country_dial_code=self.country_dial_code,
            timezone=self.business_timezone,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_timezone(tz: ZoneInfo | str | None = None) -> ZoneInfo:
    """Resuelve la zona horaria de negocio; sin argumento usa la configurada."""
    if tz is None:
        return get_settings().timezone
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz
