"""Exceptions raised across the catalog client"""
from __future__ import annotations

from typing import Optional


class PharmabookError(Exception):
    """Base class for recoverable client errors."""


class GatewayQueryError(PharmabookError):
    """A query against the remote data service failed."""

    def __init__(self, relation: str, message: str, status_code: Optional[int] = None):
        self.relation = relation
        self.message = message
        self.status_code = status_code
        suffix = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Query on '{relation}' failed{suffix}: {message}")


class AuthError(PharmabookError):
    """Sign up, sign in or sign out was rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class FavoritesWriteError(PharmabookError):
    """The favorites set could not be persisted."""
