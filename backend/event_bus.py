"""
Helios Intel - Event Bus

In-process publish/subscribe used by the Local Object Stores to announce
"collection changed" signals. Signals carry no payload: a subscriber that
hears one re-reads the collection from storage.

Supports:
- Named subscriptions (e.g. "reports-updated", "notifications-updated")
- Wildcard subscription "*" that receives every event
- Unsubscribe handles returned from on_every()

Scoped to the current process only; there is no cross-process propagation.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

WILDCARD = "*"

Handler = Callable[[str], None]


class EventBus:
    """Synchronous fan-out of named signals to registered handlers."""

    def __init__(self):
        self.subscriptions: Dict[str, List[Handler]] = {}
        self.emit_counts: Dict[str, int] = {}

    def on_every(self, event_name: str, handler: Handler) -> Callable[[], None]:
        """
        Register handler for every future emission of event_name.

        The handler receives the event name. Returns a zero-argument
        callable that removes the subscription.
        """
        self.subscriptions.setdefault(event_name, []).append(handler)

        def unsubscribe():
            self.off(event_name, handler)

        return unsubscribe

    def off(self, event_name: str, handler: Handler):
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self.subscriptions.get(event_name)
        if not handlers:
            return
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            del self.subscriptions[event_name]

    def emit(self, event_name: str):
        """Invoke every handler subscribed to event_name (and the wildcard)."""
        self.emit_counts[event_name] = self.emit_counts.get(event_name, 0) + 1

        # Snapshot so handlers may unsubscribe while being notified
        targets = list(self.subscriptions.get(event_name, []))
        if event_name != WILDCARD:
            targets.extend(self.subscriptions.get(WILDCARD, []))

        for handler in targets:
            try:
                handler(event_name)
            except Exception as e:
                logger.error(f"Event handler failed for {event_name}: {e}", exc_info=True)

    def listener_count(self, event_name: str) -> int:
        return len(self.subscriptions.get(event_name, []))

    def get_stats(self):
        """Get subscription and emission statistics."""
        return {
            "subscriptions": {
                name: len(handlers)
                for name, handlers in self.subscriptions.items()
            },
            "emitted": dict(self.emit_counts),
        }
