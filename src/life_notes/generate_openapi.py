"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script imports the FastAPI application instance and serializes its OpenAPI
schema to a JSON file so that API clients and documentation tools can consume a
stable description without running the server.

Usage:
    python -m life_notes.generate_openapi [output_path]

Notes:
- Tag metadata for health, notes and todos is guaranteed to be present.
- Without an argument the schema is written to interfaces/openapi.json under
  the current working directory.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .logging_config import get_logger, setup_logging
from .main import app, openapi_tags

logger = get_logger("generate_openapi")

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the expected tags metadata. This does not
    override existing tag definitions unless missing.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    schema = app.openapi()
    _ensure_tags(schema)

    path = out_path or DEFAULT_OUTPUT
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to: %s", path)
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    setup_logging()
    generate_openapi(args[0] if args else None)


if __name__ == "__main__":
    main()
