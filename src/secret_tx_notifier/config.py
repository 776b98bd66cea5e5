from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_seed(raw: str) -> bytes:
    """
    ENCRYPTION_SEED is written as comma-separated byte values: "12,250,3,...".
    """
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if not parts:
        raise ValueError("ENCRYPTION_SEED is empty")
    try:
        values = [int(p) for p in parts]
    except ValueError as e:
        raise ValueError("ENCRYPTION_SEED must be a comma-separated list of integers") from e
    if any(v < 0 or v > 255 for v in values):
        raise ValueError("ENCRYPTION_SEED values must be in range 0..255")
    return bytes(values)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    node_url: str = Field(..., alias="NODE")
    chain_id: str = Field(..., alias="CHAIN_ID")
    encryption_seed: str = Field(..., alias="ENCRYPTION_SEED")
    graphql_url: str = Field(..., alias="GRAPHQL")

    pushover_token: str = Field(..., alias="PUSHOVER_TOKEN")
    pushover_user: str = Field(..., alias="PUSHOVER_USER")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    transactions_file: Path = Field(default=Path("../transactions.txt"), alias="TRANSACTIONS_FILE")
    notified_file: Path = Field(default=Path("./notified.txt"), alias="NOTIFIED_FILE")

    request_delay_seconds: float = Field(default=5.0, alias="REQUEST_DELAY_SECONDS")
    http_timeout_seconds: float = Field(default=20.0, alias="HTTP_TIMEOUT_SECONDS")

    debug_probe_hash: Optional[str] = Field(default=None, alias="DEBUG_PROBE_HASH")

    sched_cron: str = Field(default="*/10 * * * *", alias="SCHED_CRON")
    sched_tz: str = Field(default="UTC", alias="SCHED_TZ")

    @field_validator("request_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("REQUEST_DELAY_SECONDS must be >= 0")
        return v

    @property
    def seed_bytes(self) -> bytes:
        return parse_seed(self.encryption_seed)

    def validate_required(self) -> None:
        for name, value in (
            ("NODE", self.node_url),
            ("CHAIN_ID", self.chain_id),
            ("GRAPHQL", self.graphql_url),
            ("PUSHOVER_TOKEN", self.pushover_token),
            ("PUSHOVER_USER", self.pushover_user),
        ):
            if not value or not value.strip():
                raise ValueError(f"{name} is required")

        if len(parse_seed(self.encryption_seed)) != 32:
            raise ValueError("ENCRYPTION_SEED must hold exactly 32 byte values")


@lru_cache
def load_settings() -> Settings:
    settings = Settings()
    settings.validate_required()
    return settings
