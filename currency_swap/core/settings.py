"""
Conversion settings using Pydantic for environment-based configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConversionSettings(BaseSettings):
    """Defaults for a conversion session."""

    default_amount_text: str = Field(
        default="1.0", description="Amount text a new session starts with"
    )

    amount_fraction_digits: int = Field(
        default=6, ge=0, description="Fraction digits of the converted amount"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


conversion_settings = ConversionSettings()
