"""
Configuration management for the Rix project generator backend
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    # Row store / object store names
    projects_table: str = "projects"
    assets_bucket: str = "project-assets"

    # Server
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000

    # Image generation (Pollinations)
    image_api_base_url: str = "https://image.pollinations.ai"
    image_width: int = 1280
    image_height: int = 720
    image_timeout_seconds: Optional[float] = None  # None = wait for the endpoint

    model_config = SettingsConfigDict(
        extra="ignore",  # Ignore extra fields like VITE_* from .env
        env_file="../.env",
        env_file_encoding="utf-8"
    )

    # Environment
    python_env: str = "development"

    # CORS
    cors_origins: list = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @property
    def supabase_configured(self) -> bool:
        """True when the backend can reach a real Supabase project"""
        return bool(self.supabase_url and (self.supabase_service_role_key or self.supabase_anon_key))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
