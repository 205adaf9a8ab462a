"""
Domain models
"""
from .project import (
    Project,
    ProjectKind,
    ProjectResources,
    SoftwareProjectDetails,
    HardwareProjectDetails,
)

__all__ = [
    "Project",
    "ProjectKind",
    "ProjectResources",
    "SoftwareProjectDetails",
    "HardwareProjectDetails",
]
