"""
Forge exceptions shared by the store, queue and engine packages.

The API layer maps each type to an HTTP status; the observer only ever
catches StoreError.
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base exception for all Forge errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ValidationError(ForgeError):
    """Operator input was rejected before any store call."""


class FeatureNotFound(ForgeError):
    def __init__(self, feature_id: str):
        self.feature_id = feature_id
        super().__init__(f"Feature not found: {feature_id}")


class PreconditionError(ForgeError):
    """The requested action is not valid for the feature's current status."""

    def __init__(self, feature_id: str, action: str, status: str, message: str | None = None):
        self.feature_id = feature_id
        self.action = action
        self.status = status
        super().__init__(
            message or f"Cannot {action} feature {feature_id}: status is '{status}'"
        )


class StoreError(ForgeError):
    """The persistent store failed or is unreachable."""
