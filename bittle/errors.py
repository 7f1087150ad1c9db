from __future__ import annotations

from typing import Any, Optional


class BittleError(Exception):
    """Base class for errors raised by the data layer."""


class StoreError(BittleError):
    """
    A hosted store call failed (transport, authorization, or a missing row
    where exactly one was required).
    """

    kind = "store"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class EntityValidationError(BittleError):
    """A record crossing the network boundary did not match its entity shape."""

    kind = "validation"

    def __init__(self, entity: str, fields: list[str], message: str = ""):
        self.entity = entity
        self.fields = fields
        detail = message or f"Invalid {entity} record: {', '.join(fields)}"
        super().__init__(detail)
        self.message = detail


class FamilyTreeAssemblyError(StoreError):
    """
    Raised when a family tree could only be partly assembled.
    `partial` holds whatever was fetched before the failure.
    """

    def __init__(self, message: str, partial: Any, *, code: Optional[str] = None):
        super().__init__(message, code=code)
        self.partial = partial


class DialogTransitionError(BittleError):
    """An action was invoked on a dialog in a state that does not accept it."""
