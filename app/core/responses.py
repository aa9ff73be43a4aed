# app/core/responses.py
"""
Response envelope shared by every endpoint:

    {"success": bool, "message": str, "data"?: any, "errors"?: {field: [str]}}
"""

from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _envelope(
    success: bool,
    message: str,
    status_code: int,
    data: Any = None,
    errors: Optional[Dict[str, List[str]]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


def success(data: Any = None, message: str = "Success") -> JSONResponse:
    return _envelope(True, message, status.HTTP_200_OK, data=data)


def created(data: Any = None, message: str = "Created successfully") -> JSONResponse:
    return _envelope(True, message, status.HTTP_201_CREATED, data=data)


def error(message: str = "Error", code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    if code < 400:
        raise ValueError("error responses need a 4xx or 5xx status")
    return _envelope(False, message, code)


def validation_error(
    errors: Dict[str, List[str]], message: str = "Validation failed"
) -> JSONResponse:
    return _envelope(False, message, 422, errors=errors)


def not_found(message: str = "Resource not found") -> JSONResponse:
    return _envelope(False, message, status.HTTP_404_NOT_FOUND)


def server_error(message: str = "Server error") -> JSONResponse:
    return _envelope(False, message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def unauthorized(message: str = "Unauthenticated") -> JSONResponse:
    return _envelope(False, message, status.HTTP_401_UNAUTHORIZED)
