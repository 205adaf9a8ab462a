"""
Business Logic Services for project generation

This package provides:
- Templated text and AI image generation
- Upload & persist workflow (Supabase Storage + rows)
- Dashboard reconciliation (per-user list, selection, view state)
- Error classification and operator setup help
- Text/PDF export
"""

from .asset_generator import AssetGenerator
from .image_generator import ImageGenerator
from .project_store import ProjectStore
from .creation_workflow import ProjectCreationWorkflow
from .dashboard import Dashboard, DashboardView
from .export_service import ExportService
from .error_classifier import ErrorCategory, classify_error

__all__ = [
    "AssetGenerator",
    "ImageGenerator",
    "ProjectStore",
    "ProjectCreationWorkflow",
    "Dashboard",
    "DashboardView",
    "ExportService",
    "ErrorCategory",
    "classify_error",
]
