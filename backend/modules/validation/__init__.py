"""
modules/validation package — data quality guards before a timeline is generated.
"""
from modules.validation.ingestion_validator import (
    ValidationResult,
    validate_attraction,
    validate_hotel,
    validate_trip_window,
    validate_transit_route,
    validate_day_number,
    filter_valid,
)

__all__ = [
    "ValidationResult",
    "validate_attraction",
    "validate_hotel",
    "validate_trip_window",
    "validate_transit_route",
    "validate_day_number",
    "filter_valid",
]
