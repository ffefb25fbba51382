from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="ShareNote API",
            version="0.1.0",
            summary="Short aliases for shared markdown notes",
            routes=app.routes,
        )

        # Document the shared secret even on endpoints where the scheme is attached implicitly
        openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})["APIKeyHeader"] = {
            "type": "apiKey",
            "in": "header",
            "name": "X-Master-Key",
            "description": "Shared secret for deleting and listing aliases. Not a cryptographic credential.",
        }

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ApiModel(BaseModel):
    """Request/response model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "error": "Unauthorized", "type": "authentication_error"},
                {"success": False, "error": "Note not found", "type": "not_found"},
                {"success": False, "error": "Missing alias or data", "type": "validation_error"},
            ]
        }
    }
