"""HTTP error taxonomy.

Routers and services raise these directly; FastAPI renders them as
``{"detail": ...}`` with the matching status code.
"""

from __future__ import annotations

from fastapi import HTTPException


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized access"):
        super().__init__(status_code=401, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=409, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=500, detail=detail)


class ServiceUnavailable(HTTPException):
    def __init__(self, detail: str = "Database not configured"):
        super().__init__(status_code=503, detail=detail)
