"""
Dashboard statistics derived from the current project list.

All numbers are computed here in Python with Decimal arithmetic; the
board is small enough that there is nothing to push down to the backend.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from agency_hub.models.project import Project, ProjectStatus, ServiceType


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_projects: int
    active_projects: int
    new_leads: int
    pipeline_value: Decimal
    active_value: Decimal
    average_rating: Decimal | None
    conversion_rate: int
    service_distribution: dict[ServiceType, int] = field(default_factory=dict)
    revenue_by_service: dict[ServiceType, Decimal] = field(default_factory=dict)


def build_dashboard_stats(projects: Sequence[Project]) -> DashboardStats:
    """
    Aggregate the board into headline numbers.

    - pipeline_value sums every project; revenue_by_service skips Cancelled.
    - average_rating covers rated projects only (None if there are none).
    - conversion_rate is the whole-percent share of Active + Completed.
    """
    distribution: dict[ServiceType, int] = {}
    revenue: dict[ServiceType, Decimal] = {}
    ratings: list[int] = []

    for p in projects:
        distribution[p.service_type] = distribution.get(p.service_type, 0) + 1
        if p.status != ProjectStatus.CANCELLED:
            revenue[p.service_type] = revenue.get(p.service_type, Decimal("0")) + p.value
        if p.rating:
            ratings.append(p.rating)

    average_rating = None
    if ratings:
        average_rating = (Decimal(sum(ratings)) / len(ratings)).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )

    converted = sum(
        1 for p in projects
        if p.status in (ProjectStatus.ACTIVE, ProjectStatus.COMPLETED)
    )
    conversion_rate = 0
    if projects:
        conversion_rate = int(
            (Decimal(converted) * 100 / len(projects)).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
        )

    return DashboardStats(
        total_projects=len(projects),
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        new_leads=sum(1 for p in projects if p.status == ProjectStatus.LEAD),
        pipeline_value=sum((p.value for p in projects), Decimal("0")),
        active_value=sum(
            (p.value for p in projects if p.status == ProjectStatus.ACTIVE),
            Decimal("0"),
        ),
        average_rating=average_rating,
        conversion_rate=conversion_rate,
        service_distribution=distribution,
        revenue_by_service=revenue,
    )
