"""
flight_booking.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FLIGHT_BOOKING_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "flight-booking"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "flight-booking"
    jwt_audience: str = "flight-booking-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_hours: int = Field(default=1, ge=1, le=24)
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./flight_booking.db"

    # Bookings
    enforce_booking_ownership: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read settings from `app.state.settings` (see `api.deps`), so
# the cached instance is only consulted by the process entrypoint.
