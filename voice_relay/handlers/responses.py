"""
JSON response helpers shared by the request handlers.
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse


def error_response(error: str, status_code: int = 500, details: Any = None) -> JSONResponse:
    """Build the JSON error body used by every relay endpoint."""
    content: Dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)
