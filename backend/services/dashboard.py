"""
Dashboard reconciliation

Owns one user's project list and current selection and decides which view
the client shows. Every mutation of the list goes through a method here.
"""
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from auth_middleware import AuthContext
from models.project import Project, ProjectKind
from services.creation_workflow import ProjectCreationWorkflow
from services.error_classifier import ErrorCategory, error_message, to_project_error
from services.errors import BucketMissing, RowStoreFailure
from services.project_store import ProjectStore, delete_project_tree
from services.setup_help import bucket_missing_help, rls_help, table_missing_help

logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[Project], bool]


class DashboardView(str, Enum):
    LOADING = "loading"
    TABLE_MISSING = "table_missing"
    ACCESS_DENIED = "access_denied"
    GENERIC_ERROR = "generic_error"
    CREATION_WIZARD = "creation_wizard"
    SELECTED_PROJECT = "selected_project"
    EMPTY_STATE = "empty_state"


@dataclass
class WizardState:
    """Creation form feedback"""
    is_submitting: bool = False
    error: Optional[str] = None
    bucket_missing: bool = False


def _deny(project: Project) -> bool:
    return False


class Dashboard:
    """Per-user project list, selection and view state"""

    def __init__(
        self,
        store: ProjectStore,
        owner: Optional[AuthContext],
        workflow: Optional[ProjectCreationWorkflow] = None,
        supabase_configured: bool = True,
        confirm: Optional[ConfirmDelete] = None,
    ):
        self.store = store
        self.owner = owner
        self.workflow = workflow or ProjectCreationWorkflow(store, owner)
        self.supabase_configured = supabase_configured
        self.confirm = confirm or _deny

        self.projects: List[Project] = []
        self.selected: Optional[Project] = None
        self.show_wizard = False
        self.is_loading = True
        self.table_missing = False
        self.access_denied = False
        self.generic_error: Optional[str] = None
        self.wizard = WizardState()
        self.alert: Optional[str] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def has_error(self) -> bool:
        return self.table_missing or self.access_denied or self.generic_error is not None

    @property
    def view(self) -> DashboardView:
        if self.is_loading:
            return DashboardView.LOADING
        if self.table_missing:
            return DashboardView.TABLE_MISSING
        if self.access_denied:
            return DashboardView.ACCESS_DENIED
        if self.generic_error is not None:
            return DashboardView.GENERIC_ERROR
        if self.show_wizard:
            return DashboardView.CREATION_WIZARD
        if self.selected is not None:
            return DashboardView.SELECTED_PROJECT
        return DashboardView.EMPTY_STATE

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Detach the view; late results from in-flight calls are dropped"""
        self._closed = True

    def _clear_errors(self) -> None:
        self.table_missing = False
        self.access_denied = False
        self.generic_error = None

    def _reconcile(self) -> None:
        if self.is_loading or self.has_error:
            return
        if not self.projects:
            # First run: go straight to the wizard
            self.show_wizard = True
            self.selected = None
        elif self.selected is None and not self.show_wizard:
            self.selected = self.projects[0]

    def _find(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Fetch the owner's projects (mount and retry)"""
        if self.owner is None:
            self.is_loading = False
            return

        self.is_loading = True
        self._clear_errors()

        try:
            if not self.supabase_configured:
                raise RowStoreFailure("Supabase not configured")
            projects = await self.store.list_projects(self.owner.user_id)
        except Exception as e:
            if self._closed:
                return
            self._record_fetch_error(e)
            self.projects = []
        else:
            if self._closed:
                return
            self.projects = projects
            if self.selected is not None:
                self.selected = self._find(self.selected.id)

        self.is_loading = False
        self._reconcile()

    def _record_fetch_error(self, error: Exception) -> None:
        category, wrapped = to_project_error(error, self.store.table)
        if category == ErrorCategory.TABLE_MISSING:
            logger.warning(f"Projects table '{self.store.table}' is missing")
            self.table_missing = True
        elif category == ErrorCategory.ACCESS_DENIED:
            logger.warning("Project fetch rejected by row-level security")
            self.access_denied = True
        else:
            logger.error(f"Database/Fetch error: {wrapped.message}")
            self.generic_error = error_message(error)

    async def create_project(self, name: str, description: str, kind: ProjectKind) -> Optional[Project]:
        """Run the creation workflow from the wizard; None on failure"""
        self.wizard = WizardState(is_submitting=True)
        try:
            project = await self.workflow.create(name, description, kind)
        except BucketMissing:
            if not self._closed:
                self.wizard = WizardState(bucket_missing=True)
            return None
        except Exception as e:
            logger.error(f"Project creation failed: {e}", exc_info=True)
            if not self._closed:
                self.wizard = WizardState(error=f"Project creation failed: {error_message(e)}")
            return None

        if self._closed:
            return None
        self.wizard = WizardState()
        self.handle_project_created(project)
        return project

    def handle_project_created(self, project: Project) -> None:
        self.projects = [project] + self.projects
        self.selected = project
        self.show_wizard = False
        self._clear_errors()

    def select_project(self, project_id: str) -> Optional[Project]:
        """Select a listed project and close the wizard; never refetches"""
        project = self._find(project_id)
        if project is None:
            return None
        self.selected = project
        self.show_wizard = False
        return project

    def open_wizard(self) -> None:
        self.show_wizard = True
        self.selected = None

    async def delete_project(self, project_id: str, confirm: Optional[ConfirmDelete] = None) -> bool:
        """
        Delete a project's stored objects, then its row.

        Local state only changes after every store call succeeded; failures
        are reported through `alert`.
        """
        project = self._find(project_id)
        if project is None or self.owner is None:
            return False
        if not (confirm or self.confirm)(project):
            return False

        self.alert = None
        try:
            await delete_project_tree(self.store, self.owner.user_id, project_id)
        except Exception as e:
            logger.error(f"Failed to delete project {project_id}: {e}")
            if not self._closed:
                self.alert = f"Error deleting project: {error_message(e)}"
            return False

        logger.info(f"✓ Project {project_id} deleted by {self.owner.user_id}")
        if self._closed:
            return True

        remaining = [p for p in self.projects if p.id != project_id]
        self.projects = remaining
        if self.selected is not None and self.selected.id == project_id:
            self.selected = remaining[0] if remaining else None
            if not remaining:
                self.show_wizard = True
        self._reconcile()
        return True

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """State for the client, including setup help for operator errors"""
        view = self.view
        help_payload = None
        if view == DashboardView.TABLE_MISSING:
            help_payload = table_missing_help(self.store.table)
        elif view == DashboardView.ACCESS_DENIED:
            help_payload = rls_help(self.store.table)

        wizard = asdict(self.wizard)
        if self.wizard.bucket_missing:
            wizard["help"] = bucket_missing_help(self.store.bucket)

        return {
            "view": view.value,
            "projects": [
                {
                    "id": p.id,
                    "name": p.name,
                    "type": p.kind.value,
                    "created_at": p.created_at,
                }
                for p in self.projects
            ],
            "selected_project": self.selected.to_row() if self.selected else None,
            "show_wizard": self.show_wizard,
            "wizard": wizard,
            "error": self.generic_error,
            "help": help_payload,
            "alert": self.alert,
            "supabase_configured": self.supabase_configured,
        }
