"""
Pydantic v2 response schemas for the analytics endpoint.

All monetary fields use Decimal — no floats anywhere.
from_attributes=True lets the DashboardStats dataclass map directly.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from agency_hub.models.project import ServiceType


class DashboardStatsOut(BaseModel):
    """Headline numbers for the dashboard."""

    model_config = ConfigDict(from_attributes=True)

    total_projects: int
    active_projects: int
    new_leads: int
    pipeline_value: Decimal
    active_value: Decimal
    average_rating: Decimal | None
    conversion_rate: int
    service_distribution: dict[ServiceType, int]
    revenue_by_service: dict[ServiceType, Decimal]
