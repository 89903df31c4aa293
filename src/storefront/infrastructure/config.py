"""Runtime configuration.

Values come from ``STOREFRONT_*`` environment variables or a ``.env`` file,
e.g. ``STOREFRONT_DATA_DIR=/var/lib/storefront``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.domain.service.stock_key_resolver import StockPolicy

# Repo root when installed in editable mode
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):

    data_dir: Path = Field(default=_DEFAULT_DATA_DIR)

    # Products without any stock data: orderable with this many units each
    unmanaged_stock_fallback: int = Field(default=999, ge=0)
    allow_unmanaged_stock: bool = Field(default=True)
    default_size: str = Field(default="One Size")

    lock_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_", env_file=".env", extra="ignore"
    )

    def stock_policy(self) -> StockPolicy:
        return StockPolicy(
            unmanaged_fallback=self.unmanaged_stock_fallback,
            allow_unmanaged=self.allow_unmanaged_stock,
            default_size=self.default_size,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
