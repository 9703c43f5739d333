"""Client-side logic for a vector database service: indexes, partitions, roles,
resource groups, consistency options, call metadata, rate-limit retries and
row mapping of search results."""

__version__ = "0.1.0"

__all__ = [
    "client",
    "errors",
    "meta_cache",
    "metadata",
    "options",
    "partition",
    "rbac",
    "resource_group",
    "retry",
    "rows",
]