"""
errors.py

Error kinds raised by the Fitbit -> Pixela sync. All of them are terminal for
a run: nothing catches them except the __main__ block, which prints and exits.
"""

from __future__ import annotations


class SyncError(RuntimeError):
    pass


class ConfigurationError(SyncError):
    """A required setting is missing or invalid (raised before any network call)."""


class HttpError(SyncError):
    def __init__(self, message: str, status_code: int, body: str):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamAuthError(HttpError):
    """Token exchange or secret-store update was rejected."""


class UpstreamDataError(HttpError):
    """Step fetch or graph publish was rejected."""


class StorageError(SyncError):
    """Local .env could not be read or written."""
