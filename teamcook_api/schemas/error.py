"""
Team Cook API: Error Response Schema
======================================

What:  The JSON body every error produced by this service itself uses.
Who:   Built by the exception handlers in main.py; referenced in route
       `responses=` declarations for the OpenAPI docs.

Upstream error bodies are NOT wrapped in this shape. They reach the client
byte-for-byte with the upstream status code.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Fields:
        error: Machine-readable error code (e.g., "upstream_unavailable")
        message: Human-readable description
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
