"""
Portfolio Backend — Project Service (Business Logic Orchestrator)
===================================================================

What:  Runs every Project operation: list/search, get, create, update, delete.
How:   Composes AuthGate → Validator (+ Normalizer) → ImageIngestor →
       ProjectRepository. All collaborators are passed in at construction.
Who:   Called by the route handlers in routes/projects.py.

Mutation flow (create / update / delete):
    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌────────────┐
    │ AuthGate │───▶│ Validate   │───▶│ Embed image  │───▶│ Repository │
    │ (401)    │    │ id, fields │    │ (data URL)   │    │ (404/500)  │
    └──────────┘    │ image (400)│    └──────────────┘    └────────────┘
                    └────────────┘

    - Authentication is checked first: an unauthenticated request never
      reaches the repository. A Principal already verified by the route is
      accepted as is, so each token is decoded once per request.
    - Every validation problem (path id, fields, image) is collected and
      raised as ONE ValidationError before any persistence call.

Update merge policy:
    Only fields present and well-typed in the request overwrite stored
    values; everything else (including coverImage when no image is attached)
    stays as it was. Concurrent updates are not detected: last write wins.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from app.exceptions import NotFoundError, ValidationError, violation
from app.repositories.project_repository import ProjectRepository
from app.schemas.project import DeleteResponse, ProjectResponse
from app.services.auth_service import AuthGate, Credential, auth_gate
from app.services.image_service import ImageIngestor, ImageUpload, image_ingestor
from app.services.validator import Validator, parse_project_id, validator

logger = logging.getLogger(__name__)

RESOURCE = "project"


class ProjectService:
    """
    Business logic layer for project operations.

    Responsibilities:
        - list_projects():  search + composite sort, public
        - get_project():    single lookup, public
        - create_project(): authenticated insert with defaults
        - update_project(): authenticated partial update
        - delete_project(): authenticated permanent removal
    """

    def __init__(
        self,
        repository: ProjectRepository,
        ingestor: Optional[ImageIngestor] = None,
        gate: Optional[AuthGate] = None,
        rules: Optional[Validator] = None,
    ):
        self.repository = repository
        self.ingestor = ingestor or image_ingestor
        self.gate = gate or auth_gate
        self.validator = rules or validator

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_projects(self, q: Optional[str] = None) -> List[ProjectResponse]:
        """
        Return all projects, or those matching q, in listing order.

        Ordering (featured DESC, order ASC, created_at DESC) and matching are
        done by the repository; a blank q lists everything.
        """
        projects = await self.repository.find(q)
        return [ProjectResponse.model_validate(p) for p in projects]

    async def get_project(self, project_id: str) -> ProjectResponse:
        """
        Raises:
            ValidationError: malformed id (checked before any lookup)
            NotFoundError:   well-formed id with no record
        """
        pid = self._require_id(project_id)
        project = await self.repository.find_by_id(pid)
        if project is None:
            raise NotFoundError(resource=RESOURCE, resource_id=str(pid))
        return ProjectResponse.model_validate(project)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_project(
        self,
        authorization: Credential,
        fields: Mapping[str, Any],
        upload: Optional[ImageUpload] = None,
    ) -> ProjectResponse:
        """
        Create a project.

        Defaults for omitted optional fields: tech=[], githubUrl="",
        demoUrl="", featured=False, order=0, coverImage=None.
        """
        principal = self.gate.authorize(authorization)

        payload, errors = self.validator.validate_create(fields)
        errors += self.ingestor.check(upload)
        if errors:
            raise ValidationError(errors=errors)

        project = await self.repository.create(
            **payload.model_dump(),
            cover_image=self.ingestor.embed(upload),
        )
        logger.info("Project %s created by subject=%s", project.id, principal.subject)
        return ProjectResponse.model_validate(project)

    async def update_project(
        self,
        authorization: Credential,
        project_id: str,
        fields: Mapping[str, Any],
        upload: Optional[ImageUpload] = None,
    ) -> ProjectResponse:
        """
        Apply a partial update.

        Raises:
            AuthenticationError: missing/invalid bearer token
            ValidationError:     malformed id, bad field, bad image (all listed)
            NotFoundError:       no project with that id
        """
        principal = self.gate.authorize(authorization)

        errors: List[Dict[str, str]] = []
        pid = parse_project_id(project_id)
        if pid is None:
            errors.append(violation("id", "Invalid project id"))
        changes, field_errors = self.validator.validate_update(fields)
        errors += field_errors
        errors += self.ingestor.check(upload)
        if errors:
            raise ValidationError(errors=errors)

        project = await self.repository.find_by_id(pid)
        if project is None:
            raise NotFoundError(resource=RESOURCE, resource_id=str(pid))

        applied = changes.changes()
        for attribute, value in applied.items():
            setattr(project, attribute, value)

        cover_image = self.ingestor.embed(upload)
        if cover_image is not None:
            project.cover_image = cover_image

        saved = await self.repository.save(project)
        logger.info(
            "Project %s updated by subject=%s (fields=%s, image=%s)",
            pid,
            principal.subject,
            sorted(applied),
            cover_image is not None,
        )
        return ProjectResponse.model_validate(saved)

    async def delete_project(
        self, authorization: Credential, project_id: str
    ) -> DeleteResponse:
        """Delete a project permanently; there is no soft-delete or undo."""
        principal = self.gate.authorize(authorization)
        pid = self._require_id(project_id)

        deleted = await self.repository.delete_by_id(pid)
        if not deleted:
            raise NotFoundError(resource=RESOURCE, resource_id=str(pid))

        logger.info("Project %s deleted by subject=%s", pid, principal.subject)
        return DeleteResponse(ok=True, id=str(pid))

    @staticmethod
    def _require_id(project_id: str) -> UUID:
        pid = parse_project_id(project_id)
        if pid is None:
            raise ValidationError.for_field("id", "Invalid project id")
        return pid
