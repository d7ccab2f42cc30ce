"""Runtime settings for the ``perps-markets`` command line tool."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..oracles.cryptocompare import BASE_URL as PRICE_API_URL
from ..sources.perps_v2 import DEFAULT_RPC_URL


class Settings(BaseSettings):
    """Configuration sourced from environment variables (and ``.env``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    contract_address: str = Field(
        default="",
        validation_alias=AliasChoices("contract_address", "next_public_perps_v2_market_data_address"),
        description="Address of the perps V2 market data contract.",
    )
    price_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("price_api_key", "cryptocompare_api_key"),
        description="API key sent to the price quote service.",
    )
    rpc_url: str = Field(default=DEFAULT_RPC_URL, description="JSON-RPC endpoint of the target chain.")
    price_api_url: str = Field(default=PRICE_API_URL, description="Base URL of the price quote service.")
    request_timeout_sec: float = Field(default=10.0, description="Timeout applied to every outbound call.")
    compact_breakpoint: int = Field(default=100, description="Terminal width below which compact mode is used.")
    error_message: str = Field(default="Failed to fetch market data")
    log_level: str = Field(default="WARNING")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value):
        if value is None:
            return "WARNING"
        return str(value).strip().upper() or "WARNING"

    @field_validator("compact_breakpoint")
    @classmethod
    def _positive_breakpoint(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("compact_breakpoint must be a positive integer")
        return value
