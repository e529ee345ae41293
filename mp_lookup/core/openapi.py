"""OpenAPI customization utilities.

Adds tag descriptions and documents the ``X-RateLimit-*`` response headers
on rate-limited operations, keeping documentation concerns out of the app
factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

RATE_LIMITED_PATHS = ("/api/lookup", "/api/representative")

_RATE_LIMIT_HEADERS = {
    "X-RateLimit-Limit": "Maximum lookups per window for this client address.",
    "X-RateLimit-Remaining": "Lookups left in the current window.",
    "X-RateLimit-Reset": "Seconds until the current window resets.",
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and header docs."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Lookup",
                "description": "Postal code lookups and MP selection.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        header_docs = {
            name: {"description": description, "schema": {"type": "integer"}}
            for name, description in _RATE_LIMIT_HEADERS.items()
        }
        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if path not in RATE_LIMITED_PATHS:
                continue
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                for response in method_obj.get("responses", {}).values():
                    response.setdefault("headers", {}).update(header_docs)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
