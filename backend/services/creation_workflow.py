"""
Project creation workflow

generate assets -> upload new images -> swap in public URLs -> insert one row

The row insert is the single commit point. Anything failing before it aborts
the workflow with no row written; objects uploaded by then are left in place.
"""
import base64
import binascii
import logging
import uuid
from typing import Optional, Tuple

from auth_middleware import AuthContext
from models.project import (
    IMAGE_FIELDS,
    Project,
    ProjectKind,
    ProjectResources,
    get_image,
    set_image,
)
from services.asset_generator import AssetGenerator, gather_all
from services.error_classifier import ErrorCategory, classify_error, error_message
from services.errors import (
    BucketMissing,
    GenerationFailure,
    InvalidProjectRequest,
    StorageAccessDenied,
)
from services.project_store import ProjectStore, storage_prefix

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image"


def is_encoded_image(value: str) -> bool:
    """True for a data URL payload, False for an already stored URL"""
    return value.startswith(DATA_URL_PREFIX)


def decode_data_url(value: str) -> Tuple[bytes, str]:
    """Return (bytes, content type) of a base64 data URL"""
    header, _, payload = value.partition(",")
    content_type = header[len("data:"):].split(";")[0] or "image/png"
    try:
        return base64.b64decode(payload, validate=True), content_type
    except (binascii.Error, ValueError) as e:
        raise GenerationFailure(f"Generated image payload is not valid base64: {e}")


class ProjectCreationWorkflow:
    """Creates and persists one project for an authenticated owner"""

    def __init__(
        self,
        store: ProjectStore,
        owner: Optional[AuthContext],
        generator: Optional[AssetGenerator] = None,
    ):
        self.store = store
        self.owner = owner
        self.generator = generator or AssetGenerator()

    async def create(self, name: str, description: str, kind: ProjectKind) -> Project:
        """
        Run the full workflow.

        Raises:
            InvalidProjectRequest: missing owner, name or description
            GenerationFailure: no bundle, or an image request failed
            BucketMissing: the Storage bucket does not exist
            StorageAccessDenied: a Storage policy rejected an upload
            Exception: row-store and transport errors, unchanged
        """
        if self.owner is None:
            raise InvalidProjectRequest("You must be signed in to create a project.")
        name = (name or "").strip()
        description = (description or "").strip()
        if not name or not description:
            raise InvalidProjectRequest("Project name and description are required.")
        kind = ProjectKind(kind)

        resources = await self.generator.generate(kind, description)
        if resources is None:
            raise GenerationFailure("Failed to generate project assets. The API returned no data.")

        project_id = str(uuid.uuid4())
        await self.upload_images(project_id, kind, resources)

        row = {
            "id": project_id,
            "user_id": self.owner.user_id,
            "name": name,
            "description": description,
            "type": kind.value,
            "resources": resources.model_dump(by_alias=True),
        }
        project = await self.store.insert_project(row)
        logger.info(f"✓ Project {project_id} ({kind.value}) created by {self.owner.user_id}")
        return project

    async def upload_images(self, project_id: str, kind: ProjectKind, resources: ProjectResources) -> None:
        """Upload every image field concurrently and replace it with its public URL"""
        fields = IMAGE_FIELDS[kind]
        urls = await gather_all(*[
            self.upload_image(
                get_image(resources, attr, index),
                f"{storage_prefix(self.owner.user_id, project_id)}/{filename}",
            )
            for attr, index, filename in fields
        ])
        for (attr, index, _), url in zip(fields, urls):
            set_image(resources, attr, index, url)

    async def upload_image(self, value: str, path: str) -> str:
        """Store one image; stored URLs pass through without an upload"""
        if not is_encoded_image(value):
            return value

        content, content_type = decode_data_url(value)
        try:
            return await self.store.upload_object(path, content, content_type)
        except Exception as e:
            category = classify_error(e, self.store.table)
            if category == ErrorCategory.BUCKET_MISSING:
                logger.warning(f"Storage bucket '{self.store.bucket}' is missing")
                raise BucketMissing(f"Storage bucket '{self.store.bucket}' not found.") from e
            if category == ErrorCategory.ACCESS_DENIED:
                logger.warning(f"Storage policy rejected upload to {self.store.bucket}/{path}")
                raise StorageAccessDenied(error_message(e), code=getattr(e, "code", None)) from e
            logger.error(f"Image upload failed for {path}: {error_message(e)}")
            raise
