"""Runtime settings for the Ordering context.

Pricing constants live here rather than in the domain model so that they can
be tuned per deployment through ``ORDERING_*`` environment variables.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrderingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ORDERING_", env_file=".env", extra="ignore")

    tax_rate: Decimal = Field(Decimal("0.08"), ge=0, description="Sales tax applied to the order subtotal")
    shipping_fee: Decimal = Field(Decimal("9.99"), ge=0, description="Flat shipping fee per order")
    currency: str = Field("USD", min_length=3, max_length=3)
    log_level: str | None = Field(None, description="Root log level; derived from the environment when unset")
    log_dir: str | None = Field(None, description="Directory for rotating log files; console only when unset")


@lru_cache
def get_settings() -> OrderingSettings:
    """Return the process-wide settings, loaded once from the environment."""
    return OrderingSettings()
