"""
Run the Life Notes API with uvicorn.

Usage:
    python -m life_notes
    life-notes
"""
from __future__ import annotations

import uvicorn

from .logging_config import setup_logging
from .settings import get_settings


def main() -> None:
    """Start the server on the configured host and port."""
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "life_notes.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
