"""
Projects router — the agency board.

All routes require a signed-in session. Writes are optimistic (see
services/project_board.py): a failed insert leaves the temporary row on
the board until the next reload; a failed update reloads the board.

Endpoints:
  GET   /projects              — list (optional search, forced refresh)
  GET   /projects/board        — grouped by status column
  GET   /projects/clients      — unique client names
  GET   /projects/diagnostics  — connection status + fetch log
  POST  /projects              — create from the full form
  POST  /projects/quick        — create from the quick-add card
  POST  /projects/quote        — create from the pricing calculator
  PATCH /projects/{id}         — edit status / value / notes
"""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from agency_hub.auth.dependencies import CurrentSession, Dashboard
from agency_hub.models.project import Project, ProjectDraft
from agency_hub.schemas.project import (
    DiagnosticsOut,
    ProjectBoardOut,
    ProjectCreate,
    ProjectListOut,
    ProjectPatch,
    QuickProjectCreate,
    QuotedProjectCreate,
    default_deadline,
)
from agency_hub.services.pricing_calculator import build_quote
from agency_hub.services.project_board import (
    POLICY_SQL,
    ProjectNotFoundError,
    ProjectWriteError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])


@router.get(
    "",
    response_model=ProjectListOut,
    summary="List projects, newest first",
)
async def list_projects(
    dashboard: Dashboard,
    session: CurrentSession,
    search: str = Query(default="", description="Match client name, email, or service type"),
    refresh: bool = Query(default=False, description="Reload from the backend first"),
) -> ProjectListOut:
    board = dashboard.board
    if refresh:
        await board.load(session)
    else:
        await board.current(session)

    projects = board.search(search)
    return ProjectListOut(
        connection_status=board.status,
        count=len(projects),
        projects=projects,
    )


@router.get(
    "/board",
    response_model=ProjectBoardOut,
    summary="Projects grouped by status column",
)
async def get_board(
    dashboard: Dashboard,
    session: CurrentSession,
    search: str = Query(default=""),
) -> ProjectBoardOut:
    board = dashboard.board
    await board.current(session)
    return ProjectBoardOut(
        connection_status=board.status,
        columns=board.columns(board.search(search)),
    )


@router.get(
    "/clients",
    response_model=list[str],
    summary="Unique client names (autocomplete)",
)
async def list_clients(dashboard: Dashboard, session: CurrentSession) -> list[str]:
    await dashboard.board.current(session)
    return dashboard.board.client_names()


@router.get(
    "/diagnostics",
    response_model=DiagnosticsOut,
    summary="Connection status and the last fetch log",
)
async def get_diagnostics(dashboard: Dashboard, session: CurrentSession) -> DiagnosticsOut:
    board = dashboard.board
    await board.current(session)
    return DiagnosticsOut(
        connection_status=board.status,
        debug_log=board.debug_log,
        policy_sql=POLICY_SQL if board.needs_policy_hint() else None,
    )


async def _add(dashboard: Dashboard, session: CurrentSession, draft: ProjectDraft) -> Project:
    try:
        created = await dashboard.board.add(draft, session)
    except ProjectWriteError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    logger.info("Project for %s added by %s", draft.client_name, session.email)
    return created


@router.post(
    "",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
)
async def create_project(
    payload: ProjectCreate,
    dashboard: Dashboard,
    session: CurrentSession,
) -> Project:
    return await _add(dashboard, session, payload.to_draft())


@router.post(
    "/quick",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
    summary="Quick-add a lead",
)
async def quick_add_project(
    payload: QuickProjectCreate,
    dashboard: Dashboard,
    session: CurrentSession,
) -> Project:
    return await _add(dashboard, session, payload.to_draft())


@router.post(
    "/quote",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project priced by the calculator",
    description="Value and notes are derived server-side from the calculator inputs.",
)
async def create_quoted_project(
    payload: QuotedProjectCreate,
    dashboard: Dashboard,
    session: CurrentSession,
) -> Project:
    quote = build_quote(
        payload.service_type,
        payload.feature_ids,
        payload.rush,
        payload.manual_adjustment,
    )
    draft = ProjectDraft(
        client_name=payload.client_name,
        email=payload.email,
        phone=payload.phone,
        service_type=payload.service_type,
        status=payload.status,
        value=quote.total,
        deadline=default_deadline(),
        notes=quote.notes,
    )
    return await _add(dashboard, session, draft)


@router.patch(
    "/{project_id}",
    response_model=Project,
    summary="Update status, value, or notes",
)
async def update_project(
    project_id: str,
    payload: ProjectPatch,
    dashboard: Dashboard,
    session: CurrentSession,
) -> Project:
    board = dashboard.board
    await board.current(session)
    try:
        return await board.update(project_id, payload.to_update(), session)
    except ProjectNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project '{project_id}' not found.",
        ) from exc
    except ProjectWriteError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
