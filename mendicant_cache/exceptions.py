"""
Exceptions raised by the cache package.

Tier-2 and Tier-3 faults are absorbed at the tier boundary and never surface
as exceptions. Only structural defects inside the in-memory tier do.
"""


class CacheError(Exception):
    """Base class for cache errors."""


class CacheIntegrityError(CacheError):
    """The in-memory LRU structure is internally inconsistent."""
