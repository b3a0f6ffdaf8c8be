"""Forwarding circuit breaker."""

import logging
import threading

logger = logging.getLogger(__name__)


class ForwardingGate:
    """
    Process-lifetime switch deciding whether events may be forwarded.

    Starts open. A challenge round-trip where the downstream derives a
    different token closes it; only a later matching round-trip reopens
    it. State is in memory only.
    """

    def __init__(self, initially_open: bool = True):
        self._lock = threading.Lock()
        self._open = initially_open

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._open

    def open(self) -> None:
        with self._lock:
            was_open, self._open = self._open, True
        if not was_open:
            logger.info("Forwarding gate reopened")

    def close(self) -> None:
        with self._lock:
            was_open, self._open = self._open, False
        if was_open:
            logger.warning("Forwarding gate closed: downstream considered suspicious")

    def record_challenge_result(self, matched: bool) -> None:
        if matched:
            self.open()
        else:
            self.close()

    def __repr__(self) -> str:
        return f"ForwardingGate(open={self.is_open})"
