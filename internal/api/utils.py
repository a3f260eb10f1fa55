"""
API utility functions for response formatting.

The /mp3 endpoint answers in plain text (a URL or a short message).
JSON endpoints (/, /health) follow the format:
{
    "error_code": int,      # 0 = success
    "message": str,         # Human-readable message
    "data": Any             # Response data (omit if empty)
}
"""

from typing import Any, Dict, Mapping, Optional

from fastapi import Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.constants import CORS_PREFLIGHT_HEADERS
from core.messages import ErrorMessages

ALLOW_ORIGIN_HEADER = {
    "Access-Control-Allow-Origin": CORS_PREFLIGHT_HEADERS["Access-Control-Allow-Origin"]
}


def success_response(
    message: str = "Success",
    data: Any = None,
) -> Dict[str, Any]:
    """
    Create a success response dictionary.

    Example:
        >>> success_response("API service is running", {"status": "running"})
        {"error_code": 0, "message": "API service is running", "data": {"status": "running"}}
    """
    response = {"error_code": 0, "message": message}
    if data is not None:
        response["data"] = data
    return response


def text_response(
    body: str,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> PlainTextResponse:
    """
    Create a newline-terminated plain text response.

    Every /mp3 response carries Access-Control-Allow-Origin so browsers
    can read it after the preflight.
    """
    merged = dict(ALLOW_ORIGIN_HEADER)
    if headers:
        merged.update(headers)
    if not body.endswith("\n"):
        body += "\n"
    return PlainTextResponse(content=body, status_code=status_code, headers=merged)


def text_error_response(message: str, status_code: int) -> PlainTextResponse:
    """Plain text error body carrying a short human-readable message."""
    return text_response(message, status_code=status_code)


def preflight_response() -> PlainTextResponse:
    """Empty 200 answer to a CORS preflight."""
    return PlainTextResponse(content="", status_code=200, headers=CORS_PREFLIGHT_HEADERS)


async def plain_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """
    Answer 405 in plain text whatever the verb; other HTTP errors keep the
    default JSON body.

    Starlette raises 405 itself when a path matches but no route accepts the
    method, so this covers verbs no route lists (TRACE, PROPFIND, ...).
    """
    if exc.status_code == 405:
        return text_response(
            ErrorMessages.METHOD_NOT_ALLOWED, status_code=405, headers=exc.headers
        )
    return await http_exception_handler(request, exc)
