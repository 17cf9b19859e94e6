"""Middleware module for teamsync backend."""

from app.middleware.authentication import AuthenticationMiddleware, is_protected_path

__all__ = [
    "AuthenticationMiddleware",
    "is_protected_path",
]
