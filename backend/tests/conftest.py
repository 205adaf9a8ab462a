"""Pytest configuration for backend tests."""

from pathlib import Path
import sys

import pytest

# Backend modules import each other as top-level modules
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from auth_middleware import AuthContext  # noqa: E402
from config import get_settings  # noqa: E402
from fakes import FakeImageGenerator, FakeProjectStore  # noqa: E402
from services.asset_generator import AssetGenerator  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Settings come from the test environment only"""
    for name in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "SUPABASE_JWT_SECRET",
        "IMAGE_API_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def owner():
    return AuthContext(user_id="owner-1", email="owner@example.com")


@pytest.fixture
def store():
    return FakeProjectStore()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def generator(image_generator):
    return AssetGenerator(image_generator)
