"""Configuration helpers for the catalog client and the catalog service.

Both sides read their settings from an environment mapping primed from an
optional ``.env`` file. Tests pass an explicit mapping instead of touching
``os.environ``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

from .network import normalise_base_url

DEFAULT_ORIGINS = (
    "https://localhost",
    "https://127.0.0.1",
    "http://localhost",
    "http://127.0.0.1",
)


def env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    """Settings for a storefront/admin session talking to the catalog API."""

    api_base_url: str
    request_timeout: float
    debounce_ms: int
    suggestion_limit: int
    log_level: str

    @property
    def debounce_delay(self) -> float:
        return self.debounce_ms / 1000


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for the catalog JSON service."""

    base_dir: Path
    product_file: Path
    product_backups: int
    allowed_origins: tuple[str, ...]
    force_tls: bool
    host: str
    port: int
    log_level: str


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or DEFAULT_ORIGINS


def _env(base_dir: Path, env: Mapping[str, str] | None) -> dict[str, str]:
    load_dotenv(Path(base_dir) / ".env")
    return dict(os.environ if env is None else env)


def load_client_config(base_dir: Path, env: Mapping[str, str] | None = None) -> ClientConfig:
    """Load client settings from the given base directory and env mapping."""

    env_map = _env(base_dir, env)
    return ClientConfig(
        api_base_url=normalise_base_url(env_map.get("CATALOG_API_BASE", "http://127.0.0.1:7890")),
        request_timeout=float(env_map.get("CATALOG_TIMEOUT", "5")),
        debounce_ms=int(env_map.get("DEBOUNCE_MS", "300")),
        suggestion_limit=int(env_map.get("SUGGESTION_LIMIT", "6")),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )


def load_service_config(base_dir: Path, env: Mapping[str, str] | None = None) -> ServiceConfig:
    """Load service settings; relative product paths resolve under ``base_dir``."""

    base_dir = Path(base_dir)
    env_map = _env(base_dir, env)
    product_file = Path(env_map.get("PRODUCT_FILE", "products.json"))
    if not product_file.is_absolute():
        product_file = base_dir / product_file
    return ServiceConfig(
        base_dir=base_dir,
        product_file=product_file,
        product_backups=max(0, int(env_map.get("PRODUCT_BACKUPS", "3"))),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", "")),
        force_tls=env_bool(env_map.get("FORCE_TLS"), True),
        host=env_map.get("API_HOST", "0.0.0.0"),
        port=int(env_map.get("API_PORT", "7890")),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )
