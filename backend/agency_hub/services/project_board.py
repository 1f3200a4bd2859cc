"""
Project board — the dashboard's view of the `projects` table.

Write discipline (optimistic updates):
  • add()    — the row appears on the board immediately under a temporary
               id, then the insert is sent. On failure the optimistic row
               stays until the next full reload; on success the board
               reloads and the stored row (real id) is returned.
  • update() — the local row is patched immediately, then the update is
               sent. On failure the board reloads from the backend, which
               discards the optimistic change.

Concurrent edits from other sessions are not reconciled: whatever the
backend holds at the next reload wins.
"""

from __future__ import annotations

import logging

from agency_hub.core.backend import BackendError, BackendGateway
from agency_hub.core.config import settings
from agency_hub.models.project import Project, ProjectDraft, ProjectStatus, ProjectUpdate
from agency_hub.models.session import ConnectionStatus, SessionInfo
from agency_hub.services.normalizer import normalize, temporary_id, to_insert_row, to_update_row

logger = logging.getLogger(__name__)

# Shown next to the diagnostics when an authenticated user still sees no
# rows; usually row-level security is blocking them.
POLICY_SQL = """\
-- Run this in the Supabase SQL editor to allow logged-in users to work with projects
create policy "Enable read access for authenticated users" on public.projects for select to authenticated using (true);
create policy "Enable insert access for authenticated users" on public.projects for insert to authenticated with check (true);
create policy "Enable update access for authenticated users" on public.projects for update to authenticated using (true);"""


class ProjectWriteError(Exception):
    """The backend rejected an insert or update."""


class ProjectNotFoundError(LookupError):
    """No project with the given id is on the board."""


class ProjectBoard:
    """In-memory view model over the projects table."""

    def __init__(self, backend: BackendGateway, table: str | None = None) -> None:
        self._backend = backend
        self._table = table or settings.PROJECTS_TABLE
        self.projects: list[Project] = []
        self.status = ConnectionStatus.LOADING
        self.debug_log: list[str] = []
        self._stale = True

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        """Force the next read to reload from the backend."""
        self._stale = True

    async def load(self, session: SessionInfo | None = None) -> list[Project]:
        """Full reload from the source of truth."""
        self.status = ConnectionStatus.LOADING
        log: list[str] = []
        if session is not None:
            log.append(f"Authenticated as: {session.email} (Role: {session.role})")
        else:
            log.append("Fetching as Anonymous (Not logged in)")
        log.append("Attempting to fetch data...")

        try:
            rows = await self._backend.select_all(self._table)
        except BackendError as exc:
            logger.error("Project fetch failed: %s", exc)
            log.append(f"Error: {exc}")
            self.projects = []
            self.status = ConnectionStatus.ERROR
        else:
            if rows:
                log.append(f"Success: Fetched {len(rows)} rows.")
                self.projects = [normalize(row) for row in rows]
                self.status = ConnectionStatus.CONNECTED
            else:
                log.append("Success: No data found in table.")
                self.projects = []
                self.status = ConnectionStatus.EMPTY

        self.debug_log = log
        self._stale = False
        return self.projects

    async def current(self, session: SessionInfo | None = None) -> list[Project]:
        """Projects on the board, reloading first if the view is stale."""
        if self._stale:
            await self.load(session)
        return self.projects

    async def add(self, draft: ProjectDraft, session: SessionInfo | None = None) -> Project:
        """Optimistically add a project, insert it, and return the stored row."""
        optimistic = Project(id=temporary_id(), **draft.model_dump())
        self.projects.insert(0, optimistic)

        try:
            stored = await self._backend.insert_row(self._table, to_insert_row(draft))
        except BackendError as exc:
            logger.error("Project insert failed: %s", exc)
            self.debug_log.append(f"Insert failed: {exc}")
            raise ProjectWriteError(f"Failed to save to database: {exc}") from exc

        created = normalize(stored)
        await self.load(session)
        return created

    async def update(
        self,
        project_id: str,
        updates: ProjectUpdate,
        session: SessionInfo | None = None,
    ) -> Project:
        """Optimistically patch a project, then write the change."""
        index = next(
            (i for i, p in enumerate(self.projects) if p.id == project_id), None
        )
        if index is None:
            raise ProjectNotFoundError(project_id)

        patched = self.projects[index].model_copy(
            update=updates.model_dump(exclude_none=True)
        )
        self.projects[index] = patched

        row = to_update_row(updates)
        if not row:
            return patched

        try:
            await self._backend.update_row(self._table, project_id, row)
        except BackendError as exc:
            logger.error("Project update failed for %s: %s", project_id, exc)
            await self.load(session)  # revert to the backend's version
            raise ProjectWriteError(f"Failed to update project: {exc}") from exc

        return patched

    def search(self, term: str) -> list[Project]:
        """Case-insensitive match on client name, email, or service type."""
        if not term:
            return list(self.projects)
        needle = term.lower()
        return [
            p for p in self.projects
            if needle in p.client_name.lower()
            or needle in p.email.lower()
            or needle in p.service_type.value.lower()
        ]

    def columns(self, projects: list[Project] | None = None) -> dict[ProjectStatus, list[Project]]:
        """Group projects under the four board columns, in column order."""
        board: dict[ProjectStatus, list[Project]] = {status: [] for status in ProjectStatus}
        for p in self.projects if projects is None else projects:
            board[p.status].append(p)
        return board

    def client_names(self) -> list[str]:
        """Sorted unique client names, for autocomplete."""
        return sorted({p.client_name for p in self.projects})

    def needs_policy_hint(self) -> bool:
        return not self.projects and self.status in (ConnectionStatus.ERROR, ConnectionStatus.EMPTY)
