"""FastAPI dependencies for collaborators injected into routes."""
from config import get_settings
from services.asset_generator import AssetGenerator
from services.image_generator import ImageGenerator
from services.project_store import ProjectStore


def get_project_store() -> ProjectStore:
    """Supabase-backed row/object store"""
    return ProjectStore()


def get_asset_generator() -> AssetGenerator:
    """Text templates + Pollinations image generator"""
    return AssetGenerator(ImageGenerator())


def get_supabase_configured() -> bool:
    """Capability flag: whether Supabase credentials are present"""
    return get_settings().supabase_configured
