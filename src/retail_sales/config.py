"""Runtime settings, read from the environment (prefix ``RETAIL_SALES_``)
or from a ``.env`` file in the working directory."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RETAIL_SALES_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = _PROJECT_ROOT / "data"
    log_level: str = "INFO"
    sale_number_prefix: str = "S"


@lru_cache
def get_settings() -> Settings:
    return Settings()
