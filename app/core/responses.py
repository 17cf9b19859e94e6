"""Response envelope shared by the auth pipeline and the HTTP layer.

Every endpoint answers with the same JSON shape::

    {"success": true, "message": "...", "data": {...}}
    {"success": false, "message": "..."}
"""

from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


@dataclass(frozen=True)
class ApiResponse:
    """A terminal result: HTTP status, human-readable message, optional payload."""

    status_code: int
    message: str
    data: Any = None

    @property
    def success(self) -> bool:
        return self.status_code < 400

    @classmethod
    def ok(cls, message: str, data: Any = None, status_code: int = 200) -> "ApiResponse":
        return cls(status_code=status_code, message=message, data=data)

    @classmethod
    def error(cls, message: str, status_code: int) -> "ApiResponse":
        return cls(status_code=status_code, message=message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body

    def to_json_response(self) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if self.status_code == 401 else None
        return JSONResponse(
            status_code=self.status_code,
            content=jsonable_encoder(self.to_dict()),
            headers=headers,
        )


class ResponseTerminated(Exception):
    """Raised from FastAPI dependencies to end a request with an ApiResponse."""

    def __init__(self, response: ApiResponse):
        super().__init__(response.message)
        self.response = response
