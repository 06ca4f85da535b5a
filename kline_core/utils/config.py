"""Configuration system backed by Pydantic + YAML."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Type, TypeVar

import yaml
from pydantic import BaseModel, Field, field_validator

from kline_core.data.feed import Category
from kline_core.data.pagination import DEFAULT_PACING_DELAY, MAX_PAGE_SIZE
from kline_core.utils.env import env_flag
from kline_core.utils.timefmt import parse_date

T = TypeVar("T", bound=BaseModel)

OutputFormat = Literal["table", "barter", "csv"]


class FetchConfig(BaseModel):
    """Parameters for one kline download."""

    symbol: str = Field(default="BTCUSDT", description="Trading pair, e.g. BTCUSDT")
    interval: str = Field(default="15", description="Kline interval code (1..720, D, W, M)")
    category: Category = Field(default=Category.LINEAR, description="spot | linear | inverse")
    start: datetime
    end: datetime
    max_records: int = Field(default=1000, ge=0, description="Cap across all pages")
    testnet: bool = Field(default_factory=lambda: env_flag("BYBIT_TESTNET"))
    output_format: OutputFormat = "table"
    instrument_index: int = Field(default=0, ge=0, description="Instrument index for barter output")
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    pacing_delay: float = Field(default=DEFAULT_PACING_DELAY, ge=0, description="Seconds between pages")
    timeout: float = Field(default=15.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        symbol = value.strip().upper()
        if not symbol:
            raise ValueError("symbol cannot be empty")
        return symbol

    @field_validator("interval", mode="before")
    @classmethod
    def coerce_interval(cls, value: Any) -> str:
        return str(value).strip()

    @field_validator("category", mode="before")
    @classmethod
    def lower_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("start", "end", mode="before")
    @classmethod
    def ensure_datetime(cls, value: Any) -> datetime:
        return parse_date(value)


def load_yaml_payload(path: Any) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file {file_path} does not exist.")
    with file_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config file {file_path} must contain a mapping.")
    return payload


def load_yaml_config(path: Any, model: Type[T]) -> T:
    """Load YAML file and parse it into the provided Pydantic model."""

    return model.model_validate(load_yaml_payload(path))
