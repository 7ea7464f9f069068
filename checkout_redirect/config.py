from __future__ import annotations

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Secret. Absence is reported per request instead of failing at startup.
    BC_ADMIN_TOKEN: str | None = None
    BC_STORE_HASH: str = "rctyyem8fp"
    BC_CHANNEL_ID: int = 1778657
    BC_API_BASE_URL: AnyHttpUrl = "https://api.bigcommerce.com"
    BC_REQUEST_TIMEOUT_SECONDS: float | None = None
    BC_AUTO_RESOLVE_MODIFIERS: bool = True

    @field_validator("BC_ADMIN_TOKEN")
    @classmethod
    def blank_token_is_missing(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("BC_STORE_HASH")
    @classmethod
    def validate_store_hash(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("BC_STORE_HASH cannot be empty")
        return cleaned

    @field_validator("BC_CHANNEL_ID")
    @classmethod
    def validate_channel_id(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("BC_CHANNEL_ID must be a positive integer")
        return value

    @property
    def api_base_url(self) -> str:
        return f"{str(self.BC_API_BASE_URL).rstrip('/')}/stores/{self.BC_STORE_HASH}/v3"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


settings = Settings()
