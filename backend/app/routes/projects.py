"""
Portfolio Backend — Project Route Handlers
============================================

What:  HTTP surface for the Project resource.
How:   Authorizes mutating calls, reads the transport body (multipart form,
       urlencoded form or JSON object) with services/body_reader.py, then
       delegates to ProjectService. No business rules live here.
Who:   Called by the portfolio frontend and its admin screens.

Routes:
    GET    /api/projects?q=     public   list / search
    GET    /api/projects/{id}   public   single project
    POST   /api/projects        bearer   create (multipart + optional `image`, or JSON)
    PUT    /api/projects/{id}   bearer   partial update
    DELETE /api/projects/{id}   bearer   permanent delete

Multipart details:
    - `tech` may be sent once ("A, B") or repeated (tech=A&tech=B)
    - `image` is the only file field; it is kept in memory, never on disk,
      and the upload is abandoned once it passes the size limit
    - JSON and urlencoded bodies are limited to settings.max_body_size
    - fields other than the known project fields are ignored
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.repositories.project_repository import ProjectRepository
from app.schemas.project import DeleteResponse, ErrorResponse, ProjectResponse
from app.services.body_reader import parse_project_body
from app.services.project_service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Projects"])

# OpenAPI description of the multipart body (read by body_reader, not FastAPI)
PROJECT_FORM_BODY = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string", "minLength": 2, "maxLength": 120},
                        "description": {"type": "string", "minLength": 10, "maxLength": 3000},
                        "tech": {"type": "string", "description": "Comma-separated or repeated"},
                        "githubUrl": {"type": "string", "format": "uri"},
                        "demoUrl": {"type": "string", "format": "uri"},
                        "featured": {"type": "boolean"},
                        "order": {"type": "integer", "format": "int32"},
                        "image": {"type": "string", "format": "binary"},
                    },
                }
            },
            "application/json": {"schema": {"type": "object"}},
        }
    }
}

MUTATION_ERRORS = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def get_project_service(db: AsyncSession = Depends(get_db_session)) -> ProjectService:
    """Build a ProjectService bound to this request's session."""
    return ProjectService(repository=ProjectRepository(db))


@router.get(
    "/projects",
    response_model=list[ProjectResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List or search projects",
    description=(
        "Returns every project, or only those whose title, description or any "
        "tech entry contains `q` (case-insensitive). Always sorted featured first, "
        "then by `order` ascending, then newest first. Not paginated."
    ),
)
async def list_projects(
    response: Response,
    q: Optional[str] = Query(default=None, description="Free-text search"),
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    projects = await service.list_projects(q)
    response.headers["X-Total-Count"] = str(len(projects))
    return projects


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={
        400: {"description": "Malformed project id", "model": ErrorResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
    },
    summary="Get a single project by ID",
)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    # project_id is a plain str so a malformed id reaches the service and
    # becomes a 400 with the standard error body
    return await service.get_project(project_id)


@router.post(
    "/projects",
    status_code=201,
    response_model=ProjectResponse,
    responses=MUTATION_ERRORS,
    openapi_extra=PROJECT_FORM_BODY,
    summary="Create a project",
)
async def create_project(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    # The gate runs before the body is read so an anonymous upload is never parsed
    principal = service.gate.authorize(authorization)
    fields, upload = await parse_project_body(request, service.ingestor.max_size)
    logger.info(
        "Create request: fields=%s, image=%s",
        sorted(fields),
        f"{upload.size} bytes" if upload else "none",
    )
    return await service.create_project(principal, fields, upload)


@router.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={**MUTATION_ERRORS, 404: {"description": "Project not found", "model": ErrorResponse}},
    openapi_extra=PROJECT_FORM_BODY,
    summary="Partially update a project",
    description=(
        "Only fields present and well-typed in the body are changed. "
        "The cover image is replaced only when a new `image` is attached."
    ),
)
async def update_project(
    project_id: str,
    request: Request,
    authorization: Optional[str] = Header(default=None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    principal = service.gate.authorize(authorization)
    fields, upload = await parse_project_body(request, service.ingestor.max_size)
    return await service.update_project(principal, project_id, fields, upload)


@router.delete(
    "/projects/{project_id}",
    response_model=DeleteResponse,
    responses={**MUTATION_ERRORS, 404: {"description": "Project not found", "model": ErrorResponse}},
    summary="Delete a project permanently",
)
async def delete_project(
    project_id: str,
    authorization: Optional[str] = Header(default=None),
    service: ProjectService = Depends(get_project_service),
) -> DeleteResponse:
    return await service.delete_project(authorization, project_id)
