"""
API Models Package
------------------
Pydantic models for the dealer API.

This package provides validated data models for:
- Reference-data request bodies (banks, counterparties, countries, ...)
- Generic message, error and health responses

Session and identity models live in ``app.auth.models``.
"""

# Reference-data request models
from app.models.reference_data_models import (
    BankRecord,
    ChartOfAccountRecord,
    ColorRecord,
    CounterpartyRecord,
    CountryRecord,
    FuelTypeRecord,
    LocationRecord,
    MakerRecord,
    ReferenceRecord,
    VehicleTypeRecord,
)

# Response models
from app.models.response_models import (
    DependencyHealth,
    ErrorResponse,
    HealthStatus,
    MessageResponse,
)

__all__ = [
    # Reference data
    "ReferenceRecord",
    "BankRecord",
    "CounterpartyRecord",
    "CountryRecord",
    "VehicleTypeRecord",
    "LocationRecord",
    "ColorRecord",
    "MakerRecord",
    "ChartOfAccountRecord",
    "FuelTypeRecord",
    # Responses
    "MessageResponse",
    "ErrorResponse",
    "HealthStatus",
    "DependencyHealth",
]
