"""Engine Layer - Caching and Service Orchestration

This module provides the stateful part of category resolution:
- CacheCoordinator: TTL namespaces (taxonomies, attributes, matches) with request coalescing
- CategoryMatchService: Main entry point for matching, search, tree and attributes
- MatchResponse / AttributeLookup: Standardized result format
- CategorySource: Collaborator protocol for raw marketplace data
"""

from .cache import CacheCoordinator, CacheEntry, CacheState, LoadStatus, TTLCache
from .result import AttributeLookup, MatchResponse
from .service import CategoryMatchService
from .sources import CategorySource, JsonSnapshotSource

__all__ = [
    "CategoryMatchService",
    "CacheCoordinator",
    "TTLCache",
    "CacheEntry",
    "CacheState",
    "LoadStatus",
    "MatchResponse",
    "AttributeLookup",
    "CategorySource",
    "JsonSnapshotSource",
]
