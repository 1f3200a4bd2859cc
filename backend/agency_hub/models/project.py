"""
Project model — one client engagement on the agency board.

Rows live in the Supabase `projects` table, whose column names are not
controlled by this app. This model is the canonical in-app shape; the
mapping to and from raw rows lives in services/normalizer.py.

Lifecycle: drafted client-side, inserted (the backend assigns the real id),
partially updated afterwards. Projects are never deleted in-app; they move
to Cancelled instead.
"""

from __future__ import annotations

import datetime
import enum
from decimal import Decimal

from pydantic import BaseModel, Field


class ServiceType(str, enum.Enum):
    """The three service lines the agency sells."""

    WEB_DEVELOPMENT = "Web Development"
    AI_SOLUTIONS = "AI Solutions"
    AD_CAMPAIGN = "Ad Campaign"


class ProjectStatus(str, enum.Enum):
    """Board column a project sits in."""

    LEAD = "Lead"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ProjectDraft(BaseModel):
    """A project that has not been persisted yet (no id)."""

    client_name: str
    email: str = ""
    phone: str = ""
    service_type: ServiceType = ServiceType.WEB_DEVELOPMENT
    status: ProjectStatus = ProjectStatus.LEAD
    # Whole dollars expected; non-negative is not enforced on read.
    value: Decimal = Decimal("0")
    deadline: datetime.date
    notes: str = ""
    rating: int | None = Field(default=None, ge=1, le=5)


class Project(ProjectDraft):
    """A project as shown on the board.

    `id` is either backend-assigned or a temporary client-side id for an
    optimistic row that has not been reloaded yet.
    """

    id: str


class ProjectUpdate(BaseModel):
    """Partial update — only the fields that are set get written."""

    client_name: str | None = None
    status: ProjectStatus | None = None
    value: Decimal | None = None
    notes: str | None = None
