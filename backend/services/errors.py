"""
Error taxonomy for project generation, persistence and dashboard loading
"""
from typing import Optional


class ProjectError(Exception):
    """Base class for failures surfaced to the user"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidProjectRequest(ProjectError):
    """Missing owner, name or description"""


class GenerationFailure(ProjectError):
    """The generators produced no usable bundle"""


class ImageGenerationError(GenerationFailure):
    """Image endpoint answered with a non-success status"""

    def __init__(self, status_code: int, reason: str = ""):
        super().__init__(
            f"Image generation failed: {status_code} {reason}".strip(),
            code=str(status_code),
        )
        self.status_code = status_code


class BucketMissing(ProjectError):
    """The Storage bucket for generated images does not exist"""


class RowStoreFailure(ProjectError):
    """Any other insert/delete/query failure"""


class TableMissing(ProjectError):
    """The projects table does not exist"""


class AccessDenied(ProjectError):
    """Row-level-security policy rejected the caller"""


class StorageAccessDenied(AccessDenied):
    """Storage object policy rejected an image upload"""
