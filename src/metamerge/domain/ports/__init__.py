"""Domain ports (interfaces) for external collaborators."""

from __future__ import annotations

from .resolving import ContainerExpander, PruneFilter, TypeResolver

__all__ = ["ContainerExpander", "PruneFilter", "TypeResolver"]
