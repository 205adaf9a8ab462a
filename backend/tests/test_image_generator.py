import base64
from urllib.parse import unquote

import httpx
import pytest
import respx

from services.errors import GenerationFailure, ImageGenerationError
from services.image_generator import (
    NEGATIVE_PROMPT,
    PHOTO_STYLE,
    SCHEMATIC_STYLE,
    ImageGenerator,
    build_prompts,
)

BASE_URL = "https://images.test"


@pytest.fixture
def image_generator():
    return ImageGenerator(base_url=BASE_URL, width=640, height=360)


def test_build_prompts_picks_style():
    enhanced, negative = build_prompts("A drone", schematic=False)
    assert enhanced == f"A drone, {PHOTO_STYLE}"
    assert negative == NEGATIVE_PROMPT

    enhanced, _ = build_prompts("Circuit schematic of a drone", schematic=True)
    assert enhanced.endswith(SCHEMATIC_STYLE)


def test_build_request(image_generator):
    url, params = image_generator.build_request("A drone / quadcopter", schematic=False)

    assert url.startswith(f"{BASE_URL}/prompt/")
    # Slashes in the prompt must not create extra path segments
    assert "/" not in url[len(f"{BASE_URL}/prompt/"):]
    assert unquote(url.rsplit("/", 1)[1]) == f"A drone / quadcopter, {PHOTO_STYLE}"
    assert params["width"] == 640
    assert params["height"] == 360
    assert params["nologo"] == "true"
    assert params["negative_prompt"] == NEGATIVE_PROMPT
    assert isinstance(params["seed"], int)


@pytest.mark.asyncio
async def test_generate_returns_data_url(image_generator):
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        route = respx_mock.get(path__startswith="/prompt/").mock(
            return_value=httpx.Response(
                httpx.codes.OK,
                content=b"png-bytes",
                headers={"content-type": "image/jpeg"},
            )
        )

        result = await image_generator.generate("A smart garden")

    assert route.called
    assert result == "data:image/jpeg;base64," + base64.b64encode(b"png-bytes").decode("ascii")
    request = route.calls.last.request
    assert request.url.params["width"] == "640"
    assert request.url.params["nologo"] == "true"


@pytest.mark.asyncio
async def test_generate_defaults_schematic_style_from_prompt(image_generator):
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        route = respx_mock.get(path__startswith="/prompt/").mock(
            return_value=httpx.Response(httpx.codes.OK, content=b"x", headers={"content-type": "image/png"})
        )

        await image_generator.generate("Circuit schematic diagram for a robot")

    assert "detailed electronic circuit schematic" in unquote(str(route.calls.last.request.url))


@pytest.mark.asyncio
async def test_non_image_content_type_falls_back_to_png(image_generator):
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        respx_mock.get(path__startswith="/prompt/").mock(
            return_value=httpx.Response(httpx.codes.OK, content=b"x", headers={"content-type": "text/plain"})
        )

        result = await image_generator.generate("A lamp")

    assert result.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_non_success_status_raises(image_generator):
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        respx_mock.get(path__startswith="/prompt/").mock(
            return_value=httpx.Response(httpx.codes.SERVICE_UNAVAILABLE)
        )

        with pytest.raises(ImageGenerationError) as exc_info:
            await image_generator.generate("A lamp")

    assert exc_info.value.status_code == 503
    assert isinstance(exc_info.value, GenerationFailure)
    assert "503" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_propagates(image_generator):
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        respx_mock.get(path__startswith="/prompt/").mock(side_effect=httpx.ConnectError("boom"))

        with pytest.raises(httpx.ConnectError):
            await image_generator.generate("A lamp")


@pytest.mark.asyncio
async def test_injected_client_is_used():
    async with respx.mock(base_url=BASE_URL) as respx_mock:
        route = respx_mock.get(path__startswith="/prompt/").mock(
            return_value=httpx.Response(httpx.codes.OK, content=b"x", headers={"content-type": "image/png"})
        )
        async with httpx.AsyncClient() as client:
            generator = ImageGenerator(base_url=BASE_URL, client=client)
            await generator.generate("A lamp")

    assert route.call_count == 1
