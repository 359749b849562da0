"""Merged views: resolution, adaptation, synthesis and lookup."""

from __future__ import annotations

from .adapter import adapt
from .base import MergedView
from .lookup import Aggregate, MergedMetadata
from .missing import MISSING, MissingView
from .resolver import resolve_attribute
from .selectors import (
    FIRST_DIRECTLY_DECLARED,
    NEAREST,
    MergedSelector,
    first_directly_declared,
    nearest,
)
from .synthesized import DEFAULT_RECORDS, RecordFactory, SynthesizedRecord, render, render_value
from .view import TypeMappedView, is_trivial, view_of, view_of_record

__all__ = [
    "DEFAULT_RECORDS",
    "FIRST_DIRECTLY_DECLARED",
    "MISSING",
    "NEAREST",
    "Aggregate",
    "MergedMetadata",
    "MergedSelector",
    "MergedView",
    "MissingView",
    "RecordFactory",
    "SynthesizedRecord",
    "TypeMappedView",
    "adapt",
    "first_directly_declared",
    "is_trivial",
    "nearest",
    "render",
    "render_value",
    "resolve_attribute",
    "view_of",
    "view_of_record",
]
