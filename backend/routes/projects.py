"""
Projects Routes
Generated project bundles: create, list, fetch, delete, export

Features:
- Creation workflow (asset generation + Supabase Storage upload + row insert)
- Owner-scoped listing, newest first
- Storage cleanup before row deletion
- Text and PDF export
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, NoReturn
from auth_middleware import verify_token, AuthContext
from dependencies import get_project_store, get_asset_generator
from models.project import Project, ProjectKind
from services.asset_generator import AssetGenerator
from services.creation_workflow import ProjectCreationWorkflow
from services.error_classifier import ErrorCategory, error_message, to_project_error
from services.errors import BucketMissing, GenerationFailure, InvalidProjectRequest, StorageAccessDenied
from services.export_service import ExportService
from services.project_store import ProjectStore, delete_project_tree
from services.setup_help import bucket_missing_help, rls_help, storage_access_help, table_missing_help
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/projects", tags=["projects"])


# ============================================
# REQUEST/RESPONSE MODELS
# ============================================

class CreateProjectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    kind: ProjectKind = Field(default=ProjectKind.SOFTWARE, alias="type")


class DeleteProjectResponse(BaseModel):
    message: str
    removed_objects: List[str]


# ============================================
# ERROR MAPPING
# ============================================

CATEGORY_STATUS = {
    ErrorCategory.TABLE_MISSING: 404,
    ErrorCategory.ACCESS_DENIED: 403,
    ErrorCategory.BUCKET_MISSING: 503,
    ErrorCategory.GENERIC: 500,
}


def raise_store_error(error: Exception, store: ProjectStore, action: str) -> NoReturn:
    """Classify a row/object store failure and raise it as an HTTPException"""
    category, wrapped = to_project_error(error, store.table)
    detail: Dict[str, Any] = {
        "category": category.value,
        "message": f"{action}: {wrapped.message}",
    }
    if category == ErrorCategory.TABLE_MISSING:
        detail["help"] = table_missing_help(store.table)
    elif category == ErrorCategory.ACCESS_DENIED:
        detail["help"] = rls_help(store.table)
    elif category == ErrorCategory.BUCKET_MISSING:
        detail["help"] = bucket_missing_help(store.bucket)

    if category == ErrorCategory.GENERIC:
        logger.error(f"{action}: {wrapped.message}", exc_info=True)
    else:
        logger.warning(f"{action}: {category.value}")
    raise HTTPException(status_code=CATEGORY_STATUS[category], detail=detail)


# ============================================
# ROUTES
# ============================================

@router.get("")
async def list_projects(
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
):
    """List the current user's projects, newest first"""
    try:
        projects = await store.list_projects(auth.user_id)
    except Exception as e:
        raise_store_error(e, store, "Failed to list projects")

    return [project.to_row() for project in projects]


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
):
    """Get project details"""
    project = await _load_project(project_id, auth, store)
    return project.to_row()


@router.post("", status_code=201)
async def create_project(
    request: CreateProjectRequest,
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
    generator: AssetGenerator = Depends(get_asset_generator),
):
    """
    Generate assets and create a new project.

    This will:
    1. Generate the text artifacts and images for the project type
    2. Upload the images to Supabase Storage under <user>/<project>/
    3. Insert the project row with the public image URLs
    """
    workflow = ProjectCreationWorkflow(store, auth, generator)

    try:
        project = await workflow.create(request.name, request.description, request.kind)
    except InvalidProjectRequest as e:
        raise HTTPException(status_code=422, detail=e.message)
    except BucketMissing as e:
        logger.warning(f"Project creation blocked: {e.message}")
        raise HTTPException(status_code=503, detail={
            "category": ErrorCategory.BUCKET_MISSING.value,
            "message": e.message,
            "help": bucket_missing_help(store.bucket),
        })
    except StorageAccessDenied as e:
        logger.warning(f"Project creation blocked by storage policy: {e.message}")
        raise HTTPException(status_code=403, detail={
            "category": ErrorCategory.ACCESS_DENIED.value,
            "message": f"Project creation failed: {e.message}",
            "help": storage_access_help(store.bucket),
        })
    except GenerationFailure as e:
        logger.error(f"Asset generation failed: {e.message}")
        raise HTTPException(status_code=502, detail=f"Failed to generate project assets: {e.message}")
    except Exception as e:
        raise_store_error(e, store, "Project creation failed")

    return project.to_row()


@router.delete("/{project_id}", response_model=DeleteProjectResponse)
async def delete_project(
    project_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
):
    """Delete a project's stored images, then the project row"""
    if not confirm:
        raise HTTPException(status_code=400, detail="Deletion must be confirmed with confirm=true")

    project = await _load_project(project_id, auth, store)

    try:
        removed = await delete_project_tree(store, auth.user_id, project.id)
    except Exception as e:
        raise_store_error(e, store, "Error deleting project")

    logger.info(f"✓ Project {project_id} deleted by {auth.email or auth.user_id}")
    return {"message": "Project deleted successfully", "removed_objects": removed}


@router.get("/{project_id}/export", response_class=PlainTextResponse)
async def export_project_text(
    project_id: str,
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
):
    """Project bundle as copyable plain text"""
    project = await _load_project(project_id, auth, store)
    return ExportService().format_text(project)


@router.get("/{project_id}/export/pdf")
async def export_project_pdf(
    project_id: str,
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
):
    """Project bundle as a PDF download"""
    project = await _load_project(project_id, auth, store)

    try:
        pdf = ExportService().render_pdf(project)
    except Exception as e:
        logger.error(f"PDF export failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"PDF export error: {error_message(e)}")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="project_{project.id}.pdf"'},
    )


async def _load_project(project_id: str, auth: AuthContext, store: ProjectStore) -> Project:
    try:
        project = await store.get_project(project_id, auth.user_id)
    except Exception as e:
        raise_store_error(e, store, "Failed to get project")

    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project
