"""Request options for collection creation, loading, search, query and import."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .meta_cache import (
    BOUNDED_TIMESTAMP,
    EVENTUALLY_TIMESTAMP,
    META_CACHE,
    STRONG_TIMESTAMP,
    ConsistencyLevel,
    MetaCache,
)


@dataclass
class CreateCollectionRequest:
    """Parameters of a create-collection call."""

    collection_name: str = ""
    schema: bytes = b""
    shards_num: int = 0
    consistency_level: ConsistencyLevel = ConsistencyLevel.STRONG
    properties: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class LoadCollectionRequest:
    """Parameters of a load-collection call."""

    collection_name: str = ""
    replica_number: int = 0


@dataclass
class ImportRequest:
    """Parameters of a bulk-insert call."""

    collection_name: str = ""
    partition_name: str = ""
    files: list[str] = field(default_factory=list)
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class SearchQueryOption:
    """Consistency, time travel and pagination settings of a search or query."""

    consistency_level: ConsistencyLevel = ConsistencyLevel.BOUNDED
    guarantee_timestamp: int = 0
    travel_timestamp: int = 0
    limit: int = 0
    offset: int = 0
    ignore_growing: bool = False


CreateCollectionOption = Callable[[CreateCollectionRequest], None]
LoadCollectionOption = Callable[[LoadCollectionRequest], None]
SearchQueryOptionFunc = Callable[[SearchQueryOption], None]
BulkInsertOption = Callable[[ImportRequest], None]


def with_consistency_level(level: ConsistencyLevel) -> CreateCollectionOption:
    """Set the consistency level of a new collection."""

    def apply(req: CreateCollectionRequest) -> None:
        req.consistency_level = ConsistencyLevel(level)

    return apply


def with_collection_property(key: str, value: str) -> CreateCollectionOption:
    """Add a key/value property to a new collection."""

    def apply(req: CreateCollectionRequest) -> None:
        req.properties.append((key, value))

    return apply


def with_replica_number(number: int) -> LoadCollectionOption:
    """Set the number of replicas to load."""

    def apply(req: LoadCollectionRequest) -> None:
        req.replica_number = number

    return apply


def with_ignore_growing() -> SearchQueryOptionFunc:
    """Skip growing segments."""

    def apply(option: SearchQueryOption) -> None:
        option.ignore_growing = True

    return apply


def with_offset(offset: int) -> SearchQueryOptionFunc:
    """Set the pagination offset."""

    def apply(option: SearchQueryOption) -> None:
        option.offset = offset

    return apply


def with_limit(limit: int) -> SearchQueryOptionFunc:
    """Set the pagination limit."""

    def apply(option: SearchQueryOption) -> None:
        option.limit = limit

    return apply


def with_search_query_consistency_level(level: ConsistencyLevel) -> SearchQueryOptionFunc:
    """Set the consistency level of a search or query."""

    def apply(option: SearchQueryOption) -> None:
        option.consistency_level = ConsistencyLevel(level)

    return apply


def with_guarantee_timestamp(ts: int) -> SearchQueryOptionFunc:
    """Set the guarantee timestamp; only valid with customized consistency."""

    def apply(option: SearchQueryOption) -> None:
        option.guarantee_timestamp = ts

    return apply


def with_travel_timestamp(ts: int) -> SearchQueryOptionFunc:
    """Set the time-travel timestamp."""

    def apply(option: SearchQueryOption) -> None:
        option.travel_timestamp = ts

    return apply


def make_search_query_option(
    collection_name: str,
    *args: SearchQueryOptionFunc,
    cache: Optional[MetaCache] = None,
) -> SearchQueryOption:
    """Build the effective search/query option for a collection.

    The collection's cached consistency level is the default; the guarantee
    timestamp is then derived from the final level.
    """
    cache = META_CACHE if cache is None else cache
    option = SearchQueryOption()
    info = cache.get_collection_info(collection_name)
    if info is not None:
        option.consistency_level = info.consistency_level
    for apply in args:
        apply(option)

    if option.consistency_level != ConsistencyLevel.CUSTOMIZED and option.guarantee_timestamp != 0:
        raise ValueError(
            "user can only specify guarantee timestamp under customized consistency level"
        )

    level = option.consistency_level
    if level == ConsistencyLevel.STRONG:
        option.guarantee_timestamp = STRONG_TIMESTAMP
    elif level == ConsistencyLevel.SESSION:
        ts = cache.get_session_ts(collection_name)
        option.guarantee_timestamp = EVENTUALLY_TIMESTAMP if ts is None else ts
    elif level == ConsistencyLevel.BOUNDED:
        option.guarantee_timestamp = BOUNDED_TIMESTAMP
    elif level == ConsistencyLevel.EVENTUALLY:
        option.guarantee_timestamp = EVENTUALLY_TIMESTAMP
    return option


def with_start_ts(start_ts: int) -> BulkInsertOption:
    """Set the start timestamp of a bulk insert."""

    def apply(req: ImportRequest) -> None:
        req.options["start_ts"] = str(start_ts)

    return apply


def with_end_ts(end_ts: int) -> BulkInsertOption:
    """Set the end timestamp of a bulk insert."""

    def apply(req: ImportRequest) -> None:
        req.options["end_ts"] = str(end_ts)

    return apply