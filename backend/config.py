"""Application configuration using pydantic-settings."""

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from services.credential_manager import CREDENTIAL_KEYS, get_credential


class KeychainSettingsSource(PydanticBaseSettingsSource):
    """Load credential fields from the OS keychain via ``keyring``.

    Only fields whose uppercase name appears in
    :data:`~services.credential_manager.CREDENTIAL_KEYS` are looked up.
    All other fields return ``None`` so the next source in the chain
    handles them.
    """

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        env_name = field_name.upper()
        if env_name not in CREDENTIAL_KEYS:
            return None, field_name, False
        value = get_credential(env_name)
        return value, field_name, False

    def __call__(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, field_info in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field_info, field_name)
            # An empty keychain entry must not shadow the environment.
            if value:
                values[key] = value
        return values


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            KeychainSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Database
    DATABASE_URL: str = "sqlite:///./wallets.db"

    # Price providers. Without a TwelveData key only crypto is priced.
    TWELVEDATA_API_KEY: str = ""
    COINGECKO_API_KEY: str = ""
    PRICE_CACHE_TTL_SECONDS: float = 60.0
    PRICE_REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Valuation / snapshots
    SNAPSHOT_TIMEZONE: str = "Europe/Bratislava"
    ANALYTICS_WINDOW_DAYS: int = 60
    HOLDING_EPSILON: float = 1e-12

    @field_validator("SNAPSHOT_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the zoneinfo database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"SNAPSHOT_TIMEZONE is not a known timezone: {v!r}")
        return v

    @field_validator("ANALYTICS_WINDOW_DAYS")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ANALYTICS_WINDOW_DAYS must be at least 1")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    # App settings
    LOG_LEVEL: str = "INFO"


settings = Settings()
