import asyncio
import re

import pytest

from fakes import (
    PNG_BYTES,
    PNG_DATA_URL,
    BackendError,
    FakeImageGenerator,
    Rendezvous,
    RendezvousImageGenerator,
    RendezvousProjectStore,
)
from models.project import HardwareProjectDetails, ProjectKind
from services.asset_generator import AssetGenerator, gather_all
from services.creation_workflow import (
    ProjectCreationWorkflow,
    decode_data_url,
    is_encoded_image,
)
from services.errors import (
    AccessDenied,
    BucketMissing,
    GenerationFailure,
    ImageGenerationError,
    InvalidProjectRequest,
    StorageAccessDenied,
)


class NoBundleGenerator:
    async def generate(self, kind, description):
        return None


def test_decode_data_url():
    content, content_type = decode_data_url(PNG_DATA_URL)
    assert content == PNG_BYTES
    assert content_type == "image/png"

    with pytest.raises(GenerationFailure):
        decode_data_url("data:image/png;base64,@@not-base64@@")


def test_is_encoded_image():
    assert is_encoded_image(PNG_DATA_URL)
    assert not is_encoded_image("https://example.com/a.png")


@pytest.mark.asyncio
async def test_weather_station_hardware_project(store, owner, generator):
    workflow = ProjectCreationWorkflow(store, owner, generator)

    project = await workflow.create("Weather Station", "A weather station", ProjectKind.HARDWARE)

    assert store.call_names() == ["upload_object", "insert_project"]
    row = store.rows[0]
    assert row["type"] == "hardware"
    assert row["user_id"] == "owner-1"
    assert row["id"] == project.id
    schematic_url = row["resources"]["schematics"][0]
    assert re.fullmatch(rf"https://.+/owner-1/{project.id}/schematics\.png", schematic_url)
    assert row["resources"]["blueprint"].strip()
    assert row["resources"]["buildGuide"].strip()
    assert row["resources"]["materialsList"].strip()
    assert store.objects[f"owner-1/{project.id}/schematics.png"] == (PNG_BYTES, "image/png")


@pytest.mark.asyncio
async def test_software_project_persists_urls_only(store, owner, generator):
    workflow = ProjectCreationWorkflow(store, owner, generator)

    project = await workflow.create("Habits", "A habit tracker", ProjectKind.SOFTWARE)

    inserts = [arg for name, arg in store.calls if name == "insert_project"]
    assert len(inserts) == 1
    resources = inserts[0]["resources"]
    assert resources["uiMockups"] == [
        f"https://demo.supabase.co/storage/v1/object/public/project-assets/owner-1/{project.id}/ui_mockup.png"
    ]
    assert resources["architectureDiagram"].endswith(f"/owner-1/{project.id}/architecture.png")
    assert resources["techStack"][0] == "React"
    assert not any(url.startswith("data:") for url in resources["uiMockups"])
    assert project.resources.ui_mockups == resources["uiMockups"]


@pytest.mark.asyncio
async def test_any_image_failure_means_no_insert(store, owner):
    image_generator = FakeImageGenerator(fail_on=("architecture",))
    workflow = ProjectCreationWorkflow(store, owner, AssetGenerator(image_generator))

    with pytest.raises(GenerationFailure):
        await workflow.create("Habits", "A habit tracker", ProjectKind.SOFTWARE)

    assert "insert_project" not in store.call_names()
    assert "upload_object" not in store.call_names()
    assert len(image_generator.prompts) == 2


@pytest.mark.asyncio
async def test_empty_bundle_is_generation_failure(store, owner):
    workflow = ProjectCreationWorkflow(store, owner, NoBundleGenerator())

    with pytest.raises(GenerationFailure, match="returned no data"):
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)

    assert store.calls == []


@pytest.mark.asyncio
async def test_stored_url_is_not_uploaded_again(store, owner):
    workflow = ProjectCreationWorkflow(store, owner)
    url = "https://demo.supabase.co/storage/v1/object/public/project-assets/owner-1/p1/schematics.png"
    resources = HardwareProjectDetails(
        blueprint="b", schematics=[url], build_guide="g", materials_list="m"
    )

    await workflow.upload_images("p1", ProjectKind.HARDWARE, resources)

    assert resources.schematics == [url]
    assert store.calls == []


@pytest.mark.asyncio
async def test_missing_bucket_aborts_before_insert(store, owner, generator):
    store.failures["upload_object"] = BackendError("Bucket not found")
    workflow = ProjectCreationWorkflow(store, owner, generator)

    with pytest.raises(BucketMissing) as exc_info:
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)

    assert "project-assets" in exc_info.value.message
    assert "insert_project" not in store.call_names()


@pytest.mark.asyncio
async def test_other_upload_errors_propagate_unchanged(store, owner, generator):
    error = BackendError("payload too large", code="413")
    store.failures["upload_object"] = error
    workflow = ProjectCreationWorkflow(store, owner, generator)

    with pytest.raises(BackendError) as exc_info:
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)

    assert exc_info.value is error
    assert "insert_project" not in store.call_names()


@pytest.mark.asyncio
async def test_insert_failure_propagates(store, owner, generator):
    store.failures["insert_project"] = BackendError("violates row-level security policy")
    workflow = ProjectCreationWorkflow(store, owner, generator)

    with pytest.raises(BackendError):
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)

    assert store.rows == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name,description", [("", "A lamp"), ("Lamp", "   ")])
async def test_name_and_description_are_required(store, owner, generator, name, description):
    workflow = ProjectCreationWorkflow(store, owner, generator)

    with pytest.raises(InvalidProjectRequest):
        await workflow.create(name, description, ProjectKind.HARDWARE)

    assert store.calls == []


@pytest.mark.asyncio
async def test_owner_is_required(store, generator):
    workflow = ProjectCreationWorkflow(store, None, generator)

    with pytest.raises(InvalidProjectRequest, match="signed in"):
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)


@pytest.mark.asyncio
async def test_software_images_are_generated_concurrently(store, owner):
    image_generator = RendezvousImageGenerator(Rendezvous(2))
    workflow = ProjectCreationWorkflow(store, owner, AssetGenerator(image_generator))

    # Sequential requests would wait on each other forever
    project = await asyncio.wait_for(
        workflow.create("Habits", "A habit tracker", ProjectKind.SOFTWARE),
        timeout=2,
    )

    assert len(image_generator.prompts) == 2
    assert project.resources.architecture_diagram.endswith("/architecture.png")


@pytest.mark.asyncio
async def test_images_are_uploaded_concurrently(owner, generator):
    store = RendezvousProjectStore(Rendezvous(2))
    workflow = ProjectCreationWorkflow(store, owner, generator)

    project = await asyncio.wait_for(
        workflow.create("Habits", "A habit tracker", ProjectKind.SOFTWARE),
        timeout=2,
    )

    assert store.call_names() == ["upload_object", "upload_object", "insert_project"]
    assert sorted(store.objects) == [
        f"owner-1/{project.id}/architecture.png",
        f"owner-1/{project.id}/ui_mockup.png",
    ]


@pytest.mark.asyncio
async def test_every_image_request_settles_before_failing(store, owner):
    image_generator = RendezvousImageGenerator(Rendezvous(2), fail_on=("UI mockup", "architecture"))
    workflow = ProjectCreationWorkflow(store, owner, AssetGenerator(image_generator))

    with pytest.raises(ImageGenerationError):
        await asyncio.wait_for(
            workflow.create("Habits", "A habit tracker", ProjectKind.SOFTWARE),
            timeout=2,
        )

    assert len(image_generator.prompts) == 2
    assert store.calls == []


@pytest.mark.asyncio
async def test_gather_all_raises_first_failure_after_all_settle():
    finished = []

    async def succeed():
        await asyncio.sleep(0.01)
        finished.append("late")
        return "ok"

    async def fail(message):
        raise ValueError(message)

    with pytest.raises(ValueError, match="first"):
        await gather_all(fail("first"), succeed(), fail("second"))

    assert finished == ["late"]
    assert await gather_all(succeed(), succeed()) == ["ok", "ok"]


@pytest.mark.asyncio
async def test_storage_policy_rejection_is_storage_access_denied(store, owner, generator):
    store.failures["upload_object"] = BackendError('new row violates row-level security policy', code="42501")
    workflow = ProjectCreationWorkflow(store, owner, generator)

    with pytest.raises(StorageAccessDenied) as exc_info:
        await workflow.create("Lamp", "A desk lamp", ProjectKind.HARDWARE)

    assert isinstance(exc_info.value, AccessDenied)
    assert exc_info.value.code == "42501"
    assert "insert_project" not in store.call_names()
