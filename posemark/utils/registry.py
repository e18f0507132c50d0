"""
Process-lifetime registry assigning a stable index to every object id.
"""

import logging
import threading
from typing import Dict, Hashable, Iterable, List, Tuple

logger = logging.getLogger(__name__)


class ObjectIdRegistry:
    """
    Maps object ids to integer indices in first-seen order.

    The mapping only grows: an index, once assigned, is never changed or reused.
    Indices are therefore always exactly ``0 .. len(registry) - 1``. One registry
    is meant to live as long as the process and be shared by every assembly
    cycle, so that an object keeps its display color from cycle to cycle.
    All access is serialized with a lock.
    """

    def __init__(self):
        self._indices: Dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def _index_of_locked(self, object_id: Hashable) -> int:
        index = self._indices.get(object_id)
        if index is None:
            index = len(self._indices)
            self._indices[object_id] = index
            logger.debug(f"Registered object {object_id!r} with index {index}")
        return index

    def index_of(self, object_id: Hashable) -> int:
        """
        Get the index of an object id, registering it if unseen.

        Args:
            object_id: Object identifier

        Returns:
            The index assigned to the object id
        """
        with self._lock:
            return self._index_of_locked(object_id)

    def register_all(self, object_ids: Iterable[Hashable]) -> Tuple[List[int], int]:
        """
        Register a batch of object ids under a single lock acquisition.

        Args:
            object_ids: Object identifiers in input order

        Returns:
            Tuple of (index per input id, registry size right after registration)
        """
        with self._lock:
            indices = [self._index_of_locked(object_id) for object_id in object_ids]
            return indices, len(self._indices)

    def items(self) -> List[Tuple[Hashable, int]]:
        """Snapshot of the (object id, index) pairs in index order."""
        with self._lock:
            return sorted(self._indices.items(), key=lambda item: item[1])

    def __contains__(self, object_id: Hashable) -> bool:
        with self._lock:
            return object_id in self._indices

    def __len__(self) -> int:
        with self._lock:
            return len(self._indices)

    def __repr__(self) -> str:
        return f"ObjectIdRegistry(size={len(self)})"
