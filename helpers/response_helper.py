# helpers/response_helper.py
from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ResponseEnvelope(BaseModel, Generic[T]):
    """Uniform wrapper for every API response"""
    data: Optional[T] = None
    message: str
    errors: Optional[Dict[str, str]] = None
    status_code: int


def _respond(envelope: ResponseEnvelope) -> JSONResponse:
    return JSONResponse(
        status_code=envelope.status_code,
        content=envelope.model_dump(mode="json"),
    )


def message_response(message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return _respond(ResponseEnvelope(message=message, status_code=status_code))


def data_response(data: Any, message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return _respond(ResponseEnvelope(data=data, message=message, status_code=status_code))


def error_response(message: str, status_code: int, errors: Optional[Dict[str, str]] = None) -> JSONResponse:
    return _respond(ResponseEnvelope(message=message, errors=errors, status_code=status_code))
