"""Client-side cache of collection metadata and session timestamps."""

from __future__ import annotations

import dataclasses
import enum
import threading
from dataclasses import dataclass
from typing import Any, Optional

# Timestamps with special meaning to the server.
STRONG_TIMESTAMP = 0
EVENTUALLY_TIMESTAMP = 1
BOUNDED_TIMESTAMP = 2


class ConsistencyLevel(enum.IntEnum):
    """Read consistency level of a collection or request."""

    STRONG = 0
    SESSION = 1
    BOUNDED = 2
    EVENTUALLY = 3
    CUSTOMIZED = 4


@dataclass
class CollectionInfo:
    """Cached facts about one collection."""

    id: int = 0
    name: str = ""
    schema: Any = None
    consistency_level: ConsistencyLevel = ConsistencyLevel.STRONG


class MetaCache:
    """Thread-safe store of last-write timestamps and collection info."""

    def __init__(self) -> None:
        self._session_lock = threading.Lock()
        self._coll_lock = threading.Lock()
        self._session_ts: dict[str, int] = {}
        self._coll_info: dict[str, CollectionInfo] = {}

    def get_session_ts(self, collection_name: str) -> Optional[int]:
        """Return the last write timestamp of a collection, or None."""
        with self._session_lock:
            return self._session_ts.get(collection_name)

    def set_session_ts(self, collection_name: str, ts: int) -> None:
        """Record a write timestamp; the stored value never decreases."""
        with self._session_lock:
            current = self._session_ts.get(collection_name, 0)
            self._session_ts[collection_name] = max(current, ts)

    def set_collection_info(
        self, collection_name: str, info: Optional[CollectionInfo]
    ) -> None:
        """Store a copy of the info, or forget the collection when info is None."""
        with self._coll_lock:
            if info is None:
                self._coll_info.pop(collection_name, None)
            else:
                self._coll_info[collection_name] = dataclasses.replace(info)

    def get_collection_info(self, collection_name: str) -> Optional[CollectionInfo]:
        """Return a copy of the cached info, or None."""
        with self._coll_lock:
            info = self._coll_info.get(collection_name)
            return None if info is None else dataclasses.replace(info)


META_CACHE = MetaCache()