"""
Project store - Supabase rows and Storage objects behind one async facade

The supabase client is synchronous; every call runs in a worker thread so the
event loop keeps serving while uploads and queries are in flight. Errors from
postgrest/storage propagate unchanged and are classified by the caller.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from config import get_settings
from models.project import Project
from supabase_client import get_supabase

logger = logging.getLogger(__name__)


def storage_prefix(owner_id: str, project_id: str) -> str:
    """Storage namespace owned by one project: <owner>/<project>"""
    return f"{owner_id}/{project_id}"


class ProjectStore:
    """Row store + object store collaborator"""

    def __init__(
        self,
        client: Optional[Client] = None,
        table: Optional[str] = None,
        bucket: Optional[str] = None,
    ):
        settings = get_settings()
        self._client = client
        self.table = table or settings.projects_table
        self.bucket = bucket or settings.assets_bucket

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    async def list_projects(self, owner_id: str) -> List[Project]:
        """All rows owned by owner_id, newest first"""
        def _query():
            return (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", owner_id)
                .order("created_at", desc=True)
                .execute()
            )

        result = await asyncio.to_thread(_query)
        return [Project.from_row(row) for row in result.data or []]

    async def get_project(self, project_id: str, owner_id: str) -> Optional[Project]:
        def _query():
            return (
                self.client.table(self.table)
                .select("*")
                .eq("id", project_id)
                .eq("user_id", owner_id)
                .limit(1)
                .execute()
            )

        result = await asyncio.to_thread(_query)
        rows = result.data or []
        return Project.from_row(rows[0]) if rows else None

    async def insert_project(self, row: Dict[str, Any]) -> Project:
        """Insert one row and return it as stored"""
        def _insert():
            return self.client.table(self.table).insert(row).execute()

        result = await asyncio.to_thread(_insert)
        if not result.data:
            # Insert without representation (e.g. restrictive select policy)
            return Project.from_row(row)
        return Project.from_row(result.data[0])

    async def delete_project(self, project_id: str, owner_id: str) -> None:
        def _delete():
            return (
                self.client.table(self.table)
                .delete()
                .eq("id", project_id)
                .eq("user_id", owner_id)
                .execute()
            )

        await asyncio.to_thread(_delete)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def upload_object(self, path: str, content: bytes, content_type: str = "image/png") -> str:
        """Upload (overwriting) and return the object's public URL"""
        bucket = self.client.storage.from_(self.bucket)

        def _upload():
            bucket.upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "true",
                },
            )
            return bucket.get_public_url(path)

        public_url = await asyncio.to_thread(_upload)
        logger.info(f"Uploaded to Supabase Storage: {self.bucket}/{path}")
        return public_url

    async def list_objects(self, prefix: str) -> List[str]:
        """Full paths of the objects directly under prefix"""
        def _list():
            return self.client.storage.from_(self.bucket).list(prefix)

        files = await asyncio.to_thread(_list)
        return [f"{prefix}/{file_obj['name']}" for file_obj in files or []]

    async def remove_objects(self, paths: List[str]) -> None:
        def _remove():
            return self.client.storage.from_(self.bucket).remove(paths)

        await asyncio.to_thread(_remove)


async def delete_project_tree(store: ProjectStore, owner_id: str, project_id: str) -> List[str]:
    """
    Remove a project's stored objects, then its row.

    The row is only deleted once object removal succeeded. Returns the
    removed object paths.
    """
    paths = await store.list_objects(storage_prefix(owner_id, project_id))
    if paths:
        await store.remove_objects(paths)
    await store.delete_project(project_id, owner_id)
    return paths
