"""
Project model - one user-created project and its generated resources bundle
"""
from enum import Enum
from typing import List, Optional, Union, Dict, Any, Tuple
from pydantic import BaseModel, ConfigDict, Field


class ProjectKind(str, Enum):
    """Discriminator between project variants"""
    SOFTWARE = "software"
    HARDWARE = "hardware"


class SoftwareProjectDetails(BaseModel):
    """Resources bundle for software projects"""
    model_config = ConfigDict(populate_by_name=True)

    prd: str  # Product Requirements Document
    tech_stack: List[str] = Field(alias="techStack")
    ui_mockups: List[str] = Field(alias="uiMockups")
    architecture_diagram: str = Field(alias="architectureDiagram")


class HardwareProjectDetails(BaseModel):
    """Resources bundle for hardware projects"""
    model_config = ConfigDict(populate_by_name=True)

    blueprint: str
    schematics: List[str]
    build_guide: str = Field(alias="buildGuide")
    materials_list: str = Field(alias="materialsList")


ProjectResources = Union[SoftwareProjectDetails, HardwareProjectDetails]


# (attribute, index or None, stored filename) for every image reference of a kind
IMAGE_FIELDS: Dict[ProjectKind, List[Tuple[str, Optional[int], str]]] = {
    ProjectKind.SOFTWARE: [
        ("ui_mockups", 0, "ui_mockup.png"),
        ("architecture_diagram", None, "architecture.png"),
    ],
    ProjectKind.HARDWARE: [
        ("schematics", 0, "schematics.png"),
    ],
}


def get_image(resources: ProjectResources, attr: str, index: Optional[int]) -> str:
    value = getattr(resources, attr)
    return value[index] if index is not None else value


def set_image(resources: ProjectResources, attr: str, index: Optional[int], url: str) -> None:
    if index is None:
        setattr(resources, attr, url)
    else:
        getattr(resources, attr)[index] = url


def parse_resources(kind: ProjectKind, data: Optional[Dict[str, Any]]) -> Optional[ProjectResources]:
    """Parse a stored resources blob into the variant dictated by kind"""
    if data is None:
        return None
    if kind == ProjectKind.SOFTWARE:
        return SoftwareProjectDetails.model_validate(data)
    return HardwareProjectDetails.model_validate(data)


class Project(BaseModel):
    """A persisted project row"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str
    name: str
    description: str
    kind: ProjectKind = Field(alias="type")
    created_at: Optional[str] = None
    resources: Optional[ProjectResources] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Project":
        """Build a Project from a row-store dict, choosing the resources shape by type"""
        kind = ProjectKind(row["type"])
        created_at = row.get("created_at")
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=row["name"],
            description=row["description"],
            kind=kind,
            created_at=str(created_at) if created_at is not None else None,
            resources=parse_resources(kind, row.get("resources")),
        )

    def to_row(self) -> Dict[str, Any]:
        """Row-store representation (camelCase resources keys)"""
        return self.model_dump(by_alias=True, mode="json")

    def __repr__(self):
        return f"<Project {self.name} ({self.kind.value})>"
