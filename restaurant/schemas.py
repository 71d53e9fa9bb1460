"""
Pydantic Schemas for Request/Response Validation

JSON envelopes used by the HTTP API:
    {"order": {...}}     single order
    {"orders": [...]}    orders of a table
    {"meals": [...]}     the meal catalog
"""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================

class MealResponse(BaseModel):
    """A catalog entry; cooking_time is serialized in seconds."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cooking_time: timedelta

    @field_serializer("cooking_time")
    def serialize_cooking_time(self, value: timedelta) -> int:
        return int(value.total_seconds())


class MealsResponse(BaseModel):
    """Response for listing the meal catalog."""
    meals: List[MealResponse]


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class OrderResponse(BaseModel):
    """Response schema for a single order."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    table_id: int
    meal_id: int
    added_at: datetime
    ready_at: datetime


class PutOrderResponse(BaseModel):
    """Response after adding a meal to a table."""
    order: OrderResponse


class GetOrderResponse(BaseModel):
    """Response for fetching one order."""
    order: OrderResponse


class GetOrdersResponse(BaseModel):
    """Response for listing orders of a table."""
    orders: List[OrderResponse]


# =============================================================================
# SYSTEM SCHEMAS
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime
