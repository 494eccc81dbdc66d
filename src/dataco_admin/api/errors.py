"""Exceptions raised by the API client and repositories."""
from __future__ import annotations
from typing import Optional


class ApiError(Exception):
    """Base exception for all API errors."""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthRequiredError(ApiError):
    """No usable admin token; the user has to log in again."""


class TransportError(ApiError):
    """The request never produced a usable response (network, timeout, non-JSON body)."""


class ServerRejectedError(ApiError):
    """The server answered with success=false or an error status."""
