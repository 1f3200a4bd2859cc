"""
Heuristic price calculator for new agency projects.

WHY THIS IS A SERVICE AND NOT INLINE:
  • Price is financial data — it deserves its own testable module.
  • The catalog is static configuration; the routers only pass inputs in.
  • Using Decimal everywhere avoids floating-point rounding on money.

Formula (applied in this order):
    total = base(category) + Σ feature costs + manual adjustment
    total = total × 2            (only if the rush "double tariff" is on)

Every function here is pure: nothing reads or writes persisted state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Literal

from agency_hub.models.project import ServiceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PricingFeature:
    """One add-on in the catalog. `category="All"` fits every service."""

    id: str
    label: str
    cost: Decimal
    category: ServiceType | Literal["All"]


# ── Base cost table ─────────────────────────────────────────
# Standard package price per service line, in whole dollars.
BASE_COSTS: MappingProxyType[ServiceType, Decimal] = MappingProxyType({
    ServiceType.WEB_DEVELOPMENT: Decimal("1500"),
    ServiceType.AI_SOLUTIONS: Decimal("2500"),
    ServiceType.AD_CAMPAIGN: Decimal("1000"),
})

# ── Feature catalog ─────────────────────────────────────────
AVAILABLE_FEATURES: tuple[PricingFeature, ...] = (
    # Web Development
    PricingFeature("responsive", "Mobile Responsive", Decimal("500"), ServiceType.WEB_DEVELOPMENT),
    PricingFeature("cms", "CMS Integration", Decimal("1200"), ServiceType.WEB_DEVELOPMENT),
    PricingFeature("ecommerce", "E-commerce Functionality", Decimal("2500"), ServiceType.WEB_DEVELOPMENT),
    PricingFeature("seo", "Advanced SEO Pack", Decimal("800"), ServiceType.WEB_DEVELOPMENT),
    # AI Solutions
    PricingFeature("fine_tuning", "Model Fine-Tuning", Decimal("3000"), ServiceType.AI_SOLUTIONS),
    PricingFeature("rag", "RAG Implementation", Decimal("2000"), ServiceType.AI_SOLUTIONS),
    PricingFeature("voice", "Voice/Audio Interface", Decimal("1500"), ServiceType.AI_SOLUTIONS),
    # Ad Campaign
    PricingFeature("creatives", "Creative Asset Design", Decimal("800"), ServiceType.AD_CAMPAIGN),
    PricingFeature("ab_testing", "A/B Testing Setup", Decimal("600"), ServiceType.AD_CAMPAIGN),
    PricingFeature("multi_platform", "Multi-Platform Setup", Decimal("1000"), ServiceType.AD_CAMPAIGN),
)

FEATURES_BY_ID: MappingProxyType[str, PricingFeature] = MappingProxyType(
    {feature.id: feature for feature in AVAILABLE_FEATURES}
)

RUSH_MULTIPLIER = Decimal("2")

_ZERO = Decimal("0")
_ONE = Decimal("1")


@dataclass(frozen=True, slots=True)
class Quote:
    """Full price breakdown for one calculator state."""

    category: ServiceType
    base_cost: Decimal
    features: tuple[PricingFeature, ...]
    features_cost: Decimal
    adjustment: Decimal
    rush_multiplier: Decimal
    total: Decimal
    notes: str


def _as_category(category: ServiceType | str) -> ServiceType:
    """Resolve a category name, raising ValueError if it is not a service line."""
    try:
        return ServiceType(category)
    except ValueError:
        supported = ", ".join(s.value for s in ServiceType)
        raise ValueError(
            f"Unknown service category '{category}'. "
            f"Supported categories: {supported}"
        ) from None


def _fits(feature: PricingFeature, category: ServiceType) -> bool:
    return feature.category == "All" or feature.category == category


def features_for_category(category: ServiceType | str) -> list[PricingFeature]:
    """Return the catalog entries selectable for a category, in catalog order."""
    resolved = _as_category(category)
    return [f for f in AVAILABLE_FEATURES if _fits(f, resolved)]


def selected_features(
    category: ServiceType | str,
    selected_feature_ids: Iterable[str],
) -> tuple[PricingFeature, ...]:
    """
    Resolve selected ids to catalog entries.

    Ids missing from the catalog, or belonging to another category, are
    dropped silently. Result follows catalog order, without duplicates.
    """
    resolved = _as_category(category)
    wanted = set(selected_feature_ids)
    return tuple(
        f for f in AVAILABLE_FEATURES
        if f.id in wanted and _fits(f, resolved)
    )


def rescope_selection(
    new_category: ServiceType | str,
    selected_feature_ids: Iterable[str],
) -> frozenset[str]:
    """Keep only the selected ids that still belong to `new_category`."""
    return frozenset(f.id for f in selected_features(new_category, selected_feature_ids))


def parse_adjustment(raw: Any) -> Decimal:
    """
    Parse a manual price adjustment.

    Anything that is not a finite number (empty string, "abc", None, NaN,
    Infinity) counts as zero.
    """
    if raw is None or isinstance(raw, bool):
        return _ZERO
    try:
        value = Decimal(raw.strip()) if isinstance(raw, str) else Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        return _ZERO
    if not value.is_finite():
        return _ZERO
    return value


def compute_total(
    category: ServiceType | str,
    selected_feature_ids: Iterable[str],
    rush_enabled: bool,
    manual_adjustment: Any = 0,
) -> Decimal:
    """
    Calculate the quoted price for a project.

    Args:
        category:             Service line; selects the base cost.
        selected_feature_ids: Add-on ids. Unknown or out-of-category ids
                              are ignored.
        rush_enabled:         Apply the 2× double tariff to the final sum.
        manual_adjustment:    Signed dollar amount added before the rush
                              multiplier. Non-numeric input counts as 0.

    Returns:
        Exact Decimal total in dollars.

    Raises:
        ValueError: If category is not one of the three service lines.
    """
    resolved = _as_category(category)

    total = BASE_COSTS[resolved]
    for feature in selected_features(resolved, selected_feature_ids):
        total += feature.cost
    total += parse_adjustment(manual_adjustment)

    if rush_enabled:
        total *= RUSH_MULTIPLIER

    return total


def _format_amount(amount: Decimal) -> str:
    """Render 250 as "250" and 250.50 as "250.5"."""
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def describe_order(
    category: ServiceType | str,
    selected_feature_ids: Iterable[str],
    rush_enabled: bool,
    manual_adjustment: Any = 0,
) -> str:
    """
    Build the human-readable notes stored with a new project.

    e.g. "Features: Mobile Responsive, Advanced SEO Pack. Manual Adj: -300. [RUSH ORDER APPLIED]"
    """
    labels = [f.label for f in selected_features(category, selected_feature_ids)]
    parts = [f"Features: {', '.join(labels) or 'Standard Package'}."]

    adjustment = parse_adjustment(manual_adjustment)
    if adjustment != 0:
        sign = "+" if adjustment > 0 else ""
        parts.append(f"Manual Adj: {sign}{_format_amount(adjustment)}.")

    if rush_enabled:
        parts.append("[RUSH ORDER APPLIED]")

    return " ".join(parts)


def build_quote(
    category: ServiceType | str,
    selected_feature_ids: Iterable[str],
    rush_enabled: bool,
    manual_adjustment: Any = 0,
) -> Quote:
    """Compute the total together with its breakdown and order notes."""
    resolved = _as_category(category)
    ids = list(selected_feature_ids)
    features = selected_features(resolved, ids)

    quote = Quote(
        category=resolved,
        base_cost=BASE_COSTS[resolved],
        features=features,
        features_cost=sum((f.cost for f in features), _ZERO),
        adjustment=parse_adjustment(manual_adjustment),
        rush_multiplier=RUSH_MULTIPLIER if rush_enabled else _ONE,
        total=compute_total(resolved, ids, rush_enabled, manual_adjustment),
        notes=describe_order(resolved, ids, rush_enabled, manual_adjustment),
    )
    logger.debug("Quote for %s: total=%s", resolved.value, quote.total)
    return quote
