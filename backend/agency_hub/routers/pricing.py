"""
Pricing router — the smart pricing calculator.

Pure computation: no backend access and no sign-in required. The price
is always computed server-side; clients send selections, never totals.

Endpoints:
  GET  /pricing/catalog  — base costs and add-ons (optionally per category)
  POST /pricing/quote    — total + breakdown + order notes
  POST /pricing/rescope  — drop selections that do not fit a new category
"""

from fastapi import APIRouter, Query

from agency_hub.models.project import ServiceType
from agency_hub.schemas.pricing import (
    CatalogOut,
    FeatureOut,
    QuoteOut,
    QuoteRequest,
    RescopeOut,
    RescopeRequest,
)
from agency_hub.services.pricing_calculator import (
    AVAILABLE_FEATURES,
    BASE_COSTS,
    PricingFeature,
    Quote,
    build_quote,
    features_for_category,
    rescope_selection,
)

router = APIRouter(tags=["Pricing"])


def feature_out(feature: PricingFeature) -> FeatureOut:
    category = feature.category
    return FeatureOut(
        id=feature.id,
        label=feature.label,
        cost=feature.cost,
        category=category.value if isinstance(category, ServiceType) else category,
    )


def quote_out(quote: Quote) -> QuoteOut:
    return QuoteOut(
        category=quote.category,
        base_cost=quote.base_cost,
        features=[feature_out(f) for f in quote.features],
        features_cost=quote.features_cost,
        adjustment=quote.adjustment,
        rush_multiplier=quote.rush_multiplier,
        total=quote.total,
        notes=quote.notes,
    )


@router.get(
    "/catalog",
    response_model=CatalogOut,
    summary="Base costs and add-on catalog",
)
async def get_catalog(
    service_type: ServiceType | None = Query(
        default=None,
        description="Only list add-ons selectable for this service line.",
    ),
) -> CatalogOut:
    features = (
        features_for_category(service_type) if service_type else list(AVAILABLE_FEATURES)
    )
    return CatalogOut(
        base_costs=dict(BASE_COSTS),
        features=[feature_out(f) for f in features],
    )


@router.post(
    "/quote",
    response_model=QuoteOut,
    summary="Price a project",
    description=(
        "total = (base + add-ons + manual adjustment) × 2 if rush. "
        "Unknown or out-of-category add-ons are ignored."
    ),
)
async def post_quote(payload: QuoteRequest) -> QuoteOut:
    quote = build_quote(
        payload.service_type,
        payload.feature_ids,
        payload.rush,
        payload.manual_adjustment,
    )
    return quote_out(quote)


@router.post(
    "/rescope",
    response_model=RescopeOut,
    summary="Carry a selection over to another service line",
)
async def post_rescope(payload: RescopeRequest) -> RescopeOut:
    kept = rescope_selection(payload.service_type, payload.feature_ids)
    return RescopeOut(service_type=payload.service_type, feature_ids=sorted(kept))
