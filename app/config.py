from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="JumJum Admin Reporting Service")
    cors_origins: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    pos_api_base_url: AnyHttpUrl | None = Field(
        default="https://jumjum-backend.vercel.app/api"
    )
    pos_api_token: str | None = Field(
        default=None
    )
    pos_api_timeout: float = Field(
        default=10.0
    )
    use_mock_data: bool = Field(
        default=True
    )
    business_name: str = Field(
        default="SRI KALKI JAM JAM RESORTS"
    )
    business_gstin: str | None = Field(
        default=None
    )
    report_brand: str = Field(
        default="jumjum"
    )
    all_bills_limit: int = Field(
        default=500, ge=1
    )

    model_config = SettingsConfigDict(env_prefix="JUMJUM_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
