"""
Portfolio Backend — Project Repository (document store)
=========================================================

What:  Persistence for Project records: create, search + sort, find by id,
       save, delete by id.
How:   Wraps one AsyncSession (injected per request). Search and the listing
       sort run in SQL; transaction control (commit/rollback) belongs to the
       session owner, so this class only flushes.
Who:   ProjectService is the only caller.

Search semantics (GET /api/projects?q=...):
    A project matches when its title, its description, or ANY tech entry
    contains q, case-insensitively, as a literal substring. `%` and `_` in q
    are escaped (autoescape) so they carry no wildcard meaning.

Sort (always): featured DESC, "order" ASC, created_at DESC

Error translation:
    DataError (the store rejected a value's format or range) → ValidationError (400)
    any other SQLAlchemyError                                 → DatabaseError (500)
    Nothing is retried.
"""

import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import Select, Text, delete, func, or_, select
from sqlalchemy.exc import DataError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, ValidationError, violation
from app.models.project import Project, utcnow

logger = logging.getLogger(__name__)

# Joins tech entries for matching; a control character no tag will contain,
# so a match can never span two entries
TECH_SEPARATOR = "\x1f"

LISTING_ORDER = (
    Project.featured.desc(),
    Project.order.asc(),
    Project.created_at.desc(),
)


def build_search_query(q: Optional[str] = None) -> Select:
    """
    Build the listing SELECT for an optional free-text query.

    A blank or missing q selects every project.
    """
    query = select(Project)
    term = (q or "").strip()
    if term:
        query = query.where(
            or_(
                Project.title.icontains(term, autoescape=True),
                Project.description.icontains(term, autoescape=True),
                func.array_to_string(Project.tech, TECH_SEPARATOR, type_=Text).icontains(
                    term, autoescape=True
                ),
            )
        )
    return query.order_by(*LISTING_ORDER)


class ProjectRepository:
    """
    Data access for the `projects` table.

    One instance per request, bound to that request's session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **values: Any) -> Project:
        """Insert a project and return it with its generated id and timestamps."""
        project = Project(**values)
        try:
            self.session.add(project)
            await self.session.flush()
            await self.session.refresh(project)
        except SQLAlchemyError as e:
            raise self._translate(e, "create") from e
        logger.info("Project created: %s", project.id)
        return project

    async def find(self, q: Optional[str] = None) -> List[Project]:
        """Return every project matching q, in listing order."""
        try:
            result = await self.session.execute(build_search_query(q))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._translate(e, "find") from e

    async def find_by_id(self, project_id: UUID) -> Optional[Project]:
        try:
            result = await self.session.execute(
                select(Project).where(Project.id == project_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._translate(e, "find_by_id", project_id) from e

    async def save(self, project: Project) -> Project:
        """Flush pending changes on a loaded project and return its fresh state."""
        project.updated_at = utcnow()
        try:
            await self.session.flush()
            await self.session.refresh(project)
        except SQLAlchemyError as e:
            raise self._translate(e, "save", project.id) from e
        logger.info("Project updated: %s", project.id)
        return project

    async def delete_by_id(self, project_id: UUID) -> bool:
        """Delete a project permanently. Returns False when nothing matched."""
        try:
            result = await self.session.execute(
                delete(Project).where(Project.id == project_id)
            )
        except SQLAlchemyError as e:
            raise self._translate(e, "delete_by_id", project_id) from e
        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info("Project deleted: %s", project_id)
        return deleted

    def _translate(
        self, error: SQLAlchemyError, operation: str, project_id: Optional[UUID] = None
    ) -> Exception:
        context = {"operation": operation, "error_type": type(error).__name__}
        if project_id is not None:
            context["project_id"] = str(project_id)

        if isinstance(error, DataError):
            logger.warning("Store rejected input during %s: %s", operation, str(error.orig))
            return ValidationError(
                errors=[violation("body", "A value has an invalid format or is out of range")],
                context=context,
            )

        logger.error("Database error during %s: %s", operation, str(error), exc_info=True)
        return DatabaseError(context=context)
