"""
Asset generation for one project: templated text plus concurrently generated images
"""
import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from models.project import (
    ProjectKind,
    ProjectResources,
    SoftwareProjectDetails,
    HardwareProjectDetails,
)
from services.asset_text import generate_text_assets
from services.image_generator import ImageGenerator

logger = logging.getLogger(__name__)


async def gather_all(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and wait for every one of them.

    Raises the first failure in argument order once all have settled, so no
    sibling is left running with an unretrieved exception.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


def ui_mockup_prompt(description: str) -> str:
    return (
        f"UI mockup for a web application based on this description: {description}. "
        "The style should be clean, modern, and professional. "
        "Focus on the main dashboard or landing page view."
    )


def architecture_prompt(description: str) -> str:
    return (
        f"High-level system architecture diagram for a project with this description: {description}. "
        "The diagram should illustrate the main components (e.g., frontend, backend, database, "
        "external APIs) and their interactions. Style should be a clean, professional technical diagram."
    )


def schematic_prompt(description: str) -> str:
    return f"Circuit schematic diagram for a hardware project with this description: {description}."


class AssetGenerator:
    """Produces the resources bundle for a project kind"""

    def __init__(self, image_generator: Optional[ImageGenerator] = None):
        self.image_generator = image_generator or ImageGenerator()

    async def generate(self, kind: ProjectKind, description: str) -> Optional[ProjectResources]:
        if kind == ProjectKind.SOFTWARE:
            return await self.generate_software(description)
        return await self.generate_hardware(description)

    async def generate_software(self, description: str) -> Optional[SoftwareProjectDetails]:
        """
        UI mockup and architecture diagram are requested concurrently; the
        first failure fails the whole bundle.
        """
        ui_mockup, architecture_diagram = await gather_all(
            self.image_generator.generate(ui_mockup_prompt(description), schematic=False),
            self.image_generator.generate(architecture_prompt(description), schematic=False),
        )
        if not ui_mockup or not architecture_diagram:
            logger.warning("Software asset generation returned an empty image")
            return None

        text = generate_text_assets(ProjectKind.SOFTWARE, description)
        return SoftwareProjectDetails(
            prd=text["prd"],
            tech_stack=text["tech_stack"],
            ui_mockups=[ui_mockup],
            architecture_diagram=architecture_diagram,
        )

    async def generate_hardware(self, description: str) -> Optional[HardwareProjectDetails]:
        (schematic,) = await gather_all(
            self.image_generator.generate(schematic_prompt(description), schematic=True),
        )
        if not schematic:
            logger.warning("Hardware asset generation returned an empty schematic")
            return None

        text = generate_text_assets(ProjectKind.HARDWARE, description)
        return HardwareProjectDetails(
            blueprint=text["blueprint"],
            schematics=[schematic],
            build_guide=text["build_guide"],
            materials_list=text["materials_list"],
        )
