"""Mapping graphs: discovery, alias linking and mirror grouping."""

from __future__ import annotations

from .alias import AliasDescriptor
from .builder import BuildPhase, MappingGraphBuilder
from .cache import GraphCache, KeepRoot, MappingContext
from .node import MappingGraph, MappingNode, MirrorGroup, Reference

__all__ = [
    "AliasDescriptor",
    "BuildPhase",
    "GraphCache",
    "KeepRoot",
    "MappingContext",
    "MappingGraph",
    "MappingGraphBuilder",
    "MappingNode",
    "MirrorGroup",
    "Reference",
]
