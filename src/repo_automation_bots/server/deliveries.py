"""Remember recent webhook deliveries so a redelivered event is not processed twice."""

from __future__ import annotations

import threading
from collections import OrderedDict


class DeliveryLog:
    """Bounded, thread-safe set of recently seen ``X-GitHub-Delivery`` ids."""

    def __init__(self, max_size: int = 1024) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._seen: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    def __contains__(self, delivery_id: object) -> bool:
        with self._lock:
            return delivery_id in self._seen

    def record(self, delivery_id: str) -> bool:
        """Record a delivery. Returns False if it had already been recorded."""

        with self._lock:
            if delivery_id in self._seen:
                self._seen.move_to_end(delivery_id)
                return False
            self._seen[delivery_id] = None
            while len(self._seen) > self._max_size:
                self._seen.popitem(last=False)
            return True

    def forget(self, delivery_id: str) -> None:
        with self._lock:
            self._seen.pop(delivery_id, None)
