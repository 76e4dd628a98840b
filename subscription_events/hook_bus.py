"""
In-process hook bus.

Plays the part of the platform's action hooks: listeners register with
add_action() and the platform (or a demo, or the HTTP surface) fires them
with do_action(). The real platform would be WordPress; the calling
convention is the same: a hook name plus positional arguments.

Design decisions:
- Synchronous delivery in registration order
- A failing handler is logged and does not stop the remaining handlers
- Recent dispatches are kept in a bounded log so tests can see what was fired
"""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import uuid4

logger = logging.getLogger("hook_bus")


@dataclass
class HookCall:
    """
    Record of one do_action() dispatch.

    Attributes:
        hook_name: The hook that was fired
        args: Positional arguments passed to every handler
        call_id: Unique identifier for this dispatch
        timestamp: When the hook was fired
    """
    hook_name: str
    args: tuple[Any, ...]
    call_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def __str__(self) -> str:
        return f"HookCall({self.hook_name}, id={self.call_id[:8]})"


HookHandler = Callable[..., None]


class HookBus:
    """
    Registry of hook handlers.

    Example usage:
        bus = HookBus()

        def on_active(subscription):
            print(f"Subscription {subscription.id} is active")
        bus.add_action("woocommerce_subscription_status_active", on_active)

        bus.do_action("woocommerce_subscription_status_active", subscription)
    """

    def __init__(self, max_log_size: int = 1000):
        self._handlers: dict[str, list[HookHandler]] = defaultdict(list)
        self._call_log: deque[HookCall] = deque(maxlen=max_log_size)
        self._log_events: bool = True

    def add_action(self, hook_name: str, handler: HookHandler) -> None:
        """
        Register a handler for a hook.

        The same handler can be added more than once and will then run once
        per registration.
        """
        self._handlers[hook_name].append(handler)
        logger.debug(f"Added handler to '{hook_name}'")

    def remove_action(self, hook_name: str, handler: HookHandler) -> bool:
        """
        Remove one registration of a handler.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        try:
            self._handlers[hook_name].remove(handler)
            logger.debug(f"Removed handler from '{hook_name}'")
            return True
        except ValueError:
            return False

    def do_action(self, hook_name: str, *args: Any) -> int:
        """
        Fire a hook.

        Returns:
            Number of handlers that were called

        Note: If a handler raises, the error is logged and the remaining
        handlers still run.
        """
        call = HookCall(hook_name=hook_name, args=args)
        if self._log_events:
            self._call_log.append(call)

        logger.info(f"Firing: {call}")

        handlers = list(self._handlers.get(hook_name, []))
        for handler in handlers:
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"Handler raised exception for {call}: {e!r}")

        if not handlers:
            logger.warning(f"No handlers for hook '{hook_name}'")

        return len(handlers)

    def has_action(self, hook_name: str) -> bool:
        return bool(self._handlers.get(hook_name))

    def get_handler_count(self, hook_name: str) -> int:
        return len(self._handlers.get(hook_name, []))

    def get_call_log(self) -> list[HookCall]:
        """Get a copy of the most recent dispatches, oldest first."""
        return list(self._call_log)

    def clear_call_log(self) -> None:
        self._call_log.clear()

    def set_logging(self, enabled: bool) -> None:
        """Enable or disable recording of dispatches."""
        self._log_events = enabled


# Module-level singleton for convenience
_default_bus: Optional[HookBus] = None


def get_hook_bus() -> HookBus:
    """Get the default hook bus singleton."""
    global _default_bus
    if _default_bus is None:
        _default_bus = HookBus()
    return _default_bus


def reset_hook_bus() -> HookBus:
    """Reset the default hook bus (useful for testing)."""
    global _default_bus
    _default_bus = HookBus()
    return _default_bus
