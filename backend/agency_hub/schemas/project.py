"""
Pydantic v2 schemas for the project endpoints.

Separation:
  • *Create / ProjectPatch — what the CLIENT sends.
  • Project (models/project.py) — what the SERVER returns.

Money stays Decimal end-to-end (JSON string on the wire).
"""

from __future__ import annotations

import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from agency_hub.core.config import settings
from agency_hub.models.project import (
    Project,
    ProjectDraft,
    ProjectStatus,
    ProjectUpdate,
    ServiceType,
)
from agency_hub.models.session import ConnectionStatus


def default_deadline() -> datetime.date:
    """New projects are due DEFAULT_DEADLINE_DAYS from today."""
    return datetime.date.today() + datetime.timedelta(days=settings.DEFAULT_DEADLINE_DAYS)


# ── Request schemas ─────────────────────────────────────────
class ProjectCreate(BaseModel):
    """Full project form."""

    client_name: str = Field(..., min_length=1, examples=["Acme Corp"])
    email: str = Field(default="", examples=["contact@acme.com"])
    phone: str = ""
    service_type: ServiceType = ServiceType.WEB_DEVELOPMENT
    status: ProjectStatus = ProjectStatus.LEAD
    value: Decimal = Field(default=Decimal("0"), ge=0)
    deadline: datetime.date | None = None
    notes: str = ""

    def to_draft(self) -> ProjectDraft:
        return ProjectDraft(
            **self.model_dump(exclude={"deadline"}),
            deadline=self.deadline or default_deadline(),
        )


class QuickProjectCreate(BaseModel):
    """Dashboard quick-add card: name, value, and service line only."""

    client_name: str = Field(..., min_length=1)
    value: Decimal = Field(..., ge=0)
    service_type: ServiceType = ServiceType.WEB_DEVELOPMENT

    def to_draft(self) -> ProjectDraft:
        return ProjectDraft(
            client_name=self.client_name,
            value=self.value,
            service_type=self.service_type,
            status=ProjectStatus.LEAD,
            deadline=default_deadline(),
            notes="Quick added from dashboard",
        )


class QuotedProjectCreate(BaseModel):
    """Client details plus pricing-calculator inputs; value and notes are derived."""

    client_name: str = Field(..., min_length=1)
    email: str = ""
    phone: str = ""
    status: ProjectStatus = ProjectStatus.LEAD
    service_type: ServiceType = ServiceType.WEB_DEVELOPMENT
    feature_ids: list[str] = Field(default_factory=list)
    rush: bool = False
    manual_adjustment: str | float | None = Field(
        default=0,
        description="Signed dollar amount; anything non-numeric counts as 0.",
    )


class ProjectPatch(BaseModel):
    """Edit form — status, value, notes (and name) only."""

    client_name: str | None = Field(default=None, min_length=1)
    status: ProjectStatus | None = None
    value: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None

    def to_update(self) -> ProjectUpdate:
        return ProjectUpdate(**self.model_dump())


# ── Response schemas ────────────────────────────────────────
class ProjectListOut(BaseModel):
    connection_status: ConnectionStatus
    count: int
    projects: list[Project]


class ProjectBoardOut(BaseModel):
    """Projects grouped by board column (Lead, Active, Completed, Cancelled)."""

    connection_status: ConnectionStatus
    columns: dict[ProjectStatus, list[Project]]


class DiagnosticsOut(BaseModel):
    connection_status: ConnectionStatus
    debug_log: list[str]
    policy_sql: str | None = Field(
        default=None,
        description="Suggested row-level-security policies when no rows are visible.",
    )
