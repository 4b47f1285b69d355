"""
JSON Response.

JSend-style JSON replies: ``{"status": "success", "data": ...}``,
``{"status": "fail", "data": ...}`` or ``{"status": "error", "message": ...}``.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .request import Request
from .response import Response

STATUS_SUCCESS = "success"
STATUS_FAIL = "fail"
STATUS_ERROR = "error"


class JsonEnvelope(BaseModel):
    """Serialized body of a ``JsonResponse``."""

    status: Literal["success", "fail", "error"] = Field(..., description="Outcome of the request.")
    data: Optional[Any] = Field(default=None, description="Payload for success and fail replies.")
    message: Optional[str] = Field(default=None, description="Error description for error replies.")

    model_config = ConfigDict(extra="forbid")


class JsonResponse(Response):
    """HTTP response in JSON format."""

    content_type_default = "application/json"

    def __init__(self, request: Optional[Request] = None) -> None:
        super().__init__(request=request)
        self._status = STATUS_SUCCESS
        self._success_data: Any = None
        self._fail_data: Any = None
        self._error_message: Optional[str] = None

    def get_status(self) -> str:
        return self._status

    def set_status(self, status: str) -> "JsonResponse":
        if status not in (STATUS_SUCCESS, STATUS_FAIL, STATUS_ERROR):
            raise ValueError(f"Invalid JSON response status: {status!r}")
        self._status = status
        return self

    def get_success_data(self) -> Any:
        return self._success_data

    def set_success_data(self, data: Any = None) -> "JsonResponse":
        self._success_data = data
        return self.set_status(STATUS_SUCCESS)

    def get_fail_data(self) -> Any:
        return self._fail_data

    def set_fail_data(self, data: Any) -> "JsonResponse":
        """Data describing why the request was rejected, e.g. validation errors per field."""
        self._fail_data = data
        return self.set_status(STATUS_FAIL)

    def get_error_message(self) -> Optional[str]:
        return self._error_message

    def set_error_message(self, message: str) -> "JsonResponse":
        self._error_message = message
        return self.set_status(STATUS_ERROR)

    def envelope(self) -> JsonEnvelope:
        if self._status == STATUS_ERROR:
            return JsonEnvelope(status=self._status, message=self._error_message)
        if self._status == STATUS_FAIL:
            return JsonEnvelope(status=self._status, data=self._fail_data)
        return JsonEnvelope(status=self._status, data=self._success_data)

    def output_body(self) -> str:
        if self._status == STATUS_ERROR:
            include = {"status", "message"}
        else:
            include = {"status", "data"}
        return self.envelope().model_dump_json(include=include)
