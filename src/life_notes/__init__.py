"""
Life Notes API package.

Exposes the FastAPI app for convenience imports (``from life_notes import app``).
"""

from .main import app  # noqa: F401

__version__ = "0.1.0"
