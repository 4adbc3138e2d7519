# -*- coding: utf-8 -*-
"""Location: ./schemock/services/resource_store.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Resource State Store.
This module holds the in-memory records behind the CRUD routes of one mock
server: a mapping from resource name to an ordered list of records.

Handlers perform find-then-mutate sequences, so every access goes through
``locked()``, which initializes the resource on first use and holds the store
lock for the whole read-modify-write. Nothing is persisted; a new store starts
empty and two stores never share records.

Examples:
    >>> store = ResourceStore()
    >>> with store.locked("users") as records:
    ...     records.append({"id": "1", "name": "Ann"})
    >>> store.find("users", "1")["name"]
    'Ann'
    >>> store.find("users", 1)["name"]
    'Ann'
    >>> store.remove("users", "1"), store.count("users")
    (1, 0)
"""

# Standard
from contextlib import contextmanager
import copy
import threading
from typing import Any, Dict, Iterator, List, Optional

# First-Party
from schemock.services.logging_service import LoggingService

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

Record = Dict[str, Any]


def same_id(record: Any, record_id: Any) -> bool:
    """Compare a record identifier with a requested one.

    Path parameters are always text while stored identifiers may be numbers,
    so both sides are compared in their string form.

    Args:
        record: Stored record, non-object records never match.
        record_id: Requested identifier.

    Returns:
        bool: True when the identifiers match.

    Examples:
        >>> same_id({"id": 7}, "7"), same_id({"id": "a"}, "b"), same_id({}, "None"), same_id("id", "id")
        (True, False, False, False)
    """
    return isinstance(record, dict) and "id" in record and str(record["id"]) == str(record_id)


def find_index(records: List[Any], record_id: Any) -> Optional[int]:
    """Locate the first record carrying ``record_id``.

    Args:
        records: Record list of one resource.
        record_id: Requested identifier.

    Returns:
        Optional[int]: Position of the match, None when absent.

    Examples:
        >>> find_index([{"id": 1}, "raw", {"id": "2"}], 2)
        2
        >>> find_index([], "1") is None
        True
    """
    for index, record in enumerate(records):
        if same_id(record, record_id):
            return index
    return None


class ResourceStore:
    """Per-server mapping of resource name to ordered records.

    Attributes:
        _resources: Records per resource, in insertion order
        _lock: Re-entrant lock guarding every access
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._resources: Dict[str, List[Record]] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self, resource: str) -> Iterator[List[Record]]:
        """Hold the store lock and yield the live record list of ``resource``.

        The resource is created empty on first access.

        Args:
            resource: Resource name.

        Yields:
            List[Record]: The mutable record list.
        """
        with self._lock:
            records = self._resources.setdefault(resource, [])
            yield records

    def find(self, resource: str, record_id: Any) -> Optional[Record]:
        """Find a record by identifier.

        Args:
            resource: Resource name.
            record_id: Identifier, compared in string form.

        Returns:
            Optional[Record]: Copy of the first matching record, or None.
        """
        with self.locked(resource) as records:
            index = find_index(records, record_id)
            return None if index is None else copy.deepcopy(records[index])

    def remove(self, resource: str, record_id: Any) -> int:
        """Remove every record matching ``record_id``.

        Args:
            resource: Resource name.
            record_id: Identifier, compared in string form.

        Returns:
            int: Number of removed records.
        """
        with self.locked(resource) as records:
            kept = [record for record in records if not same_id(record, record_id)]
            removed = len(records) - len(kept)
            records[:] = kept
        return removed

    def count(self, resource: str) -> int:
        """Count the records of ``resource``.

        Args:
            resource: Resource name.

        Returns:
            int: Number of records.
        """
        with self.locked(resource) as records:
            return len(records)

    def reset(self, resource: Optional[str] = None) -> None:
        """Drop the records of one resource, or of all of them.

        Args:
            resource: Resource to reset, None for the whole store.
        """
        with self._lock:
            if resource is None:
                self._resources.clear()
            else:
                self._resources.pop(resource, None)
        logger.debug(f"Reset resource store{'' if resource is None else f' for {resource}'}")
