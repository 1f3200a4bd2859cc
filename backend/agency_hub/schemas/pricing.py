"""
Pydantic v2 schemas for the pricing calculator endpoints.

All monetary fields use Decimal — no floats in responses.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from agency_hub.models.project import ServiceType


class QuoteRequest(BaseModel):
    """Calculator inputs."""

    service_type: ServiceType
    feature_ids: list[str] = Field(default_factory=list, examples=[["responsive", "seo"]])
    rush: bool = Field(default=False, description="Double tariff (2×) on the final total.")
    manual_adjustment: str | float | None = Field(
        default=0,
        examples=[-300],
        description="Signed dollar amount; anything non-numeric counts as 0.",
    )


class FeatureOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    cost: Decimal
    category: str


class QuoteOut(BaseModel):
    """Price breakdown for one calculator state."""

    model_config = ConfigDict(from_attributes=True)

    category: ServiceType
    base_cost: Decimal
    features: list[FeatureOut]
    features_cost: Decimal
    adjustment: Decimal
    rush_multiplier: Decimal
    total: Decimal
    notes: str


class CatalogOut(BaseModel):
    base_costs: dict[ServiceType, Decimal]
    features: list[FeatureOut]


class RescopeRequest(BaseModel):
    """Selection carried over when the service category changes."""

    service_type: ServiceType
    feature_ids: list[str] = Field(default_factory=list)


class RescopeOut(BaseModel):
    service_type: ServiceType
    feature_ids: list[str]
