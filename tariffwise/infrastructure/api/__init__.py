"""Tariff backend REST client."""

from tariffwise.infrastructure.api.client import ApiError, TariffApiClient

__all__ = ["ApiError", "TariffApiClient"]
