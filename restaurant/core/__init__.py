"""
Core module initialization.
Exports configuration, logging utilities and domain errors.
"""

from restaurant.core.config import get_settings, Settings, EnvironmentMode
from restaurant.core.exceptions import (
    RestaurantError,
    InvalidInput,
    NotFound,
    StorageFailure,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "RestaurantError",
    "InvalidInput",
    "NotFound",
    "StorageFailure",
]
