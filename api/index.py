"""
Vercel Serverless Function Entry Point for the Rix FastAPI Backend
"""
import sys
from pathlib import Path

# Backend modules import each other as top-level modules
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from main import app  # noqa: E402

handler = app
