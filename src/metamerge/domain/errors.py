"""Domain error hierarchy for the merge engine.

- ``ConfigurationError``: fatal, raised while a mapping graph is built (or when a
  mirror conflict is detected for one use site); never retried.
- ``NotFoundError`` family: local lookups that may legitimately fail.
- ``TypeMismatchError``: a value was requested in a shape it cannot be adapted to.
"""

from __future__ import annotations


class MetamergeError(Exception):
    """Base class for all merge engine errors."""


class ConfigurationError(MetamergeError):
    """Raised when declaration metadata is misconfigured."""


class NotFoundError(MetamergeError, LookupError):
    """Raised when a requested element does not exist."""


class AttributeNotFoundError(NotFoundError):
    """Raised when an attribute (or a value for it) is absent."""


class UnresolvableTypeError(NotFoundError):
    """Raised by type resolvers when a declaration type cannot be resolved."""

    def __init__(self, type_id: str, reason: str | None = None) -> None:
        self.type_id = type_id
        self.reason = reason
        message = f"Unable to resolve declaration type [{type_id}]"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingMetadataError(NotFoundError):
    """Raised when values are requested from a missing merged view."""


class TypeMismatchError(MetamergeError, TypeError):
    """Raised when a value cannot be adapted to the requested shape."""


__all__ = [
    "AttributeNotFoundError",
    "ConfigurationError",
    "MetamergeError",
    "MissingMetadataError",
    "NotFoundError",
    "TypeMismatchError",
    "UnresolvableTypeError",
]
