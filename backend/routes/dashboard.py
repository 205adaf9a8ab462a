"""
Dashboard Routes
Per-user dashboard session: project list, selection, wizard and view state

Each signed-in user gets one Dashboard held in memory; the client drives it
through the transitions below and renders whatever `view` it reports.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Dict, Optional
from auth_middleware import verify_token, AuthContext
from dependencies import get_project_store, get_asset_generator, get_supabase_configured
from routes.projects import CreateProjectRequest
from services.asset_generator import AssetGenerator
from services.creation_workflow import ProjectCreationWorkflow
from services.dashboard import Dashboard
from services.project_store import ProjectStore
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class DashboardRegistry:
    """Active dashboard per user id"""

    def __init__(self):
        self._dashboards: Dict[str, Dashboard] = {}

    def get(self, user_id: str) -> Optional[Dashboard]:
        return self._dashboards.get(user_id)

    def mount(
        self,
        auth: AuthContext,
        store: ProjectStore,
        generator: AssetGenerator,
        supabase_configured: bool,
    ) -> Dashboard:
        """Replace the user's dashboard with a fresh one"""
        previous = self._dashboards.get(auth.user_id)
        if previous is not None:
            previous.close()

        dashboard = Dashboard(
            store,
            auth,
            workflow=ProjectCreationWorkflow(store, auth, generator),
            supabase_configured=supabase_configured,
        )
        self._dashboards[auth.user_id] = dashboard
        return dashboard

    def clear(self) -> None:
        for dashboard in self._dashboards.values():
            dashboard.close()
        self._dashboards.clear()


registry = DashboardRegistry()


async def current_dashboard(
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
    generator: AssetGenerator = Depends(get_asset_generator),
    supabase_configured: bool = Depends(get_supabase_configured),
) -> Dashboard:
    """The user's dashboard, mounted and loaded on first use"""
    dashboard = registry.get(auth.user_id)
    if dashboard is None:
        dashboard = registry.mount(auth, store, generator, supabase_configured)
        await dashboard.refresh()
    return dashboard


# ============================================
# ROUTES
# ============================================

@router.get("")
async def get_dashboard(
    reset: bool = Query(False, description="Remount the dashboard and refetch"),
    auth: AuthContext = Depends(verify_token),
    store: ProjectStore = Depends(get_project_store),
    generator: AssetGenerator = Depends(get_asset_generator),
    supabase_configured: bool = Depends(get_supabase_configured),
):
    """Current dashboard state"""
    dashboard = registry.get(auth.user_id)
    if dashboard is None or reset:
        dashboard = registry.mount(auth, store, generator, supabase_configured)
        await dashboard.refresh()
    return dashboard.snapshot()


@router.post("/retry")
async def retry(dashboard: Dashboard = Depends(current_dashboard)):
    """Refetch projects after an error"""
    await dashboard.refresh()
    return dashboard.snapshot()


@router.post("/wizard")
async def open_wizard(dashboard: Dashboard = Depends(current_dashboard)):
    """Start a new project"""
    dashboard.open_wizard()
    return dashboard.snapshot()


@router.post("/projects")
async def create_project(
    request: CreateProjectRequest,
    dashboard: Dashboard = Depends(current_dashboard),
):
    """Submit the creation wizard; failures are reported in `wizard`"""
    await dashboard.create_project(request.name, request.description, request.kind)
    return dashboard.snapshot()


@router.post("/select/{project_id}")
async def select_project(project_id: str, dashboard: Dashboard = Depends(current_dashboard)):
    """Show one of the listed projects"""
    if dashboard.select_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return dashboard.snapshot()


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    dashboard: Dashboard = Depends(current_dashboard),
):
    """Delete a listed project; failures are reported in `alert`"""
    if not any(p.id == project_id for p in dashboard.projects):
        raise HTTPException(status_code=404, detail="Project not found")

    await dashboard.delete_project(project_id, confirm=lambda project: confirm)
    return dashboard.snapshot()
