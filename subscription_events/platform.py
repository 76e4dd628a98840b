"""
Subscription platform simulator.

Fires platform hooks for stored subscriptions the same way the platform
would: status hooks fire after the status has changed, scheduled hooks pass
only the subscription id, everything else passes the subscription object.

Used by the demo, the CLI and the HTTP surface. The mapper doesn't know
this class exists; it only sees hooks.
"""

import logging
from typing import Optional

from shared.data_store import DataStore, get_data_store
from subscription_events.hook_bus import HookBus, get_hook_bus
from subscription_events.hooks import HOOK_TABLE, HookSpec

logger = logging.getLogger("subscription_platform")


class SubscriptionPlatform:
    """
    Fires subscription hooks against the data store.

    Example:
        platform = SubscriptionPlatform()
        platform.fire(Hooks.STATUS_CANCELLED, 42)
    """

    def __init__(
        self,
        hook_bus: Optional[HookBus] = None,
        data_store: Optional[DataStore] = None,
    ):
        self.hook_bus = hook_bus or get_hook_bus()
        self.data_store = data_store or get_data_store()

    def fire(self, hook_name: str, subscription_id: int) -> int:
        """
        Fire a hook for one subscription.

        Args:
            hook_name: A hook from HOOK_TABLE
            subscription_id: Subscription the hook is about

        Returns:
            Number of handlers called

        Raises:
            KeyError: If the hook is not in HOOK_TABLE
            LookupError: If the subscription doesn't exist
        """
        spec = HOOK_TABLE[hook_name]

        subscription = self.data_store.get_subscription(subscription_id)
        if subscription is None:
            raise LookupError(f"Subscription not found: {subscription_id}")

        if spec.status is not None:
            previous_status = subscription.status
            subscription = self.data_store.update_subscription_status(subscription_id, spec.status)
            logger.info(
                f"Subscription {subscription_id}: {previous_status} -> {subscription.status}"
            )

        return self._do_action(spec, subscription)

    def _do_action(self, spec: HookSpec, subscription) -> int:
        if spec.passes_id:
            return self.hook_bus.do_action(spec.hook_name, subscription.id)
        return self.hook_bus.do_action(spec.hook_name, subscription)
