from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UNIT = "יח׳"
DEFAULT_CURRENCY = "ILS"

TransitionPolicy = Literal["monotonic", "permissive"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SO_", extra="ignore")

    database_url: str = "sqlite+pysqlite:///./orders.db"

    currency: str = DEFAULT_CURRENCY
    default_unit: str = DEFAULT_UNIT

    # monotonic: one step forward or to cancelled | permissive: any status from a non-terminal one
    transition_policy: TransitionPolicy = "monotonic"

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    status_update_attempts: int = Field(
        default=3,
        ge=1,
        description="attempts per status change when the stored status moved underneath us",
    )

    log_level: str = "INFO"
    log_file: Path | None = None

    def model_post_init(self, __context) -> None:
        if not re.fullmatch(r"[A-Z]{3}", self.currency):
            raise ValueError(f"currency must be a 3-letter upper-case code, got {self.currency!r}")
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
