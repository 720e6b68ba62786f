"""
Cancellation tokens for stateful flows that await backend calls.

A flow holds one token for its lifetime. When the host tears the flow down it
calls cancel(); any await that resolves afterwards checks the token and drops
its result instead of writing to a flow nobody is looking at.
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class CancellationToken:
    def __init__(self):
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in cancellation callback: {e}")

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Run callback when the token is cancelled (immediately if it already is)."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)
