# schemas/response.py
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from utils.clock import rfc3339


# Uniform envelope: {status_code, status, message, data|error, timestamp}
def build_envelope(status_code: int, message: str, data: Any = None, error: Optional[str] = None) -> dict:
    body = {
        "status_code": status_code,
        "status": "error" if status_code >= 400 else "success",
        "message": message,
    }
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if error is not None:
        body["error"] = error
    body["timestamp"] = rfc3339()
    return body


def success_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=build_envelope(status_code, message, data=data))


def error_response(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=build_envelope(status_code, message, error=detail))
