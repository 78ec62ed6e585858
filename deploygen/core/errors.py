"""
Status errors — the failure taxonomy shared by stores and the generator.

Stores raise ``NotFoundError`` for absent objects. The generator raises
``InvalidSpecError`` when a referenced repository cannot produce an
image. Anything else a store raises is passed through untouched.
"""

from __future__ import annotations


class StatusError(Exception):
    """Base class for errors that describe the state of an object.

    Attributes:
        reason: Machine-readable reason (``NotFound``, ``Invalid``, ...).
        kind: Kind of the object involved (``DeploymentConfig`` etc.).
        name: Name of the object involved.
    """

    reason = "Unknown"

    def __init__(self, message: str, kind: str = "", name: str = ""):
        super().__init__(message)
        self.kind = kind
        self.name = name

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "kind": self.kind,
            "name": self.name,
            "message": str(self),
        }


class NotFoundError(StatusError):
    """Raised when a config or repository does not exist."""

    reason = "NotFound"

    def __init__(self, kind: str, name: str):
        super().__init__(f'{kind} "{name}" not found', kind=kind, name=name)


class InvalidSpecError(StatusError):
    """Raised when an object exists but cannot be used as declared."""

    reason = "Invalid"


class ContextCancelledError(StatusError):
    """Raised when a collaborator call is made on a cancelled context."""

    reason = "Cancelled"

    def __init__(self, message: str = "request context cancelled"):
        super().__init__(message)
