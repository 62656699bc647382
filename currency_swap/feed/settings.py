"""
Price feed settings using Pydantic for environment-based configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """Price feed client configuration using Pydantic settings."""

    feed_url: str = Field(
        default="https://interview.switcheo.com/prices.json",
        description="URL of the JSON price feed",
    )

    request_timeout: float = Field(
        default=10, gt=0, description="Total timeout in seconds for the feed request"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create a global instance
feed_settings = FeedSettings()
