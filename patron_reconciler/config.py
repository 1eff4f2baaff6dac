"""Settings loaded from the environment (or a local .env file)."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class NonPaidDonationPolicy(str, Enum):
    # non-"Paid" rows (refunds included) are subtracted from the lifetime total
    SUBTRACT = "subtract"
    # non-"Paid" rows contribute nothing
    IGNORE = "ignore"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    TAG_VOCABULARY_URL: str = "https://6719768f7fc4c5ff8f4d84f1.mockapi.io/api/v1/tags"
    TAG_VOCABULARY_TIMEOUT: float = 10.0

    NON_PAID_DONATION_POLICY: NonPaidDonationPolicy = NonPaidDonationPolicy.SUBTRACT

    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
