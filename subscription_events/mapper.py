"""
Subscription event mapper.

Listens to the platform's subscription hooks and turns each firing into one
outbound event: resolve the subscription, resolve the user, build the
details payload, attach a monetary value where the hook calls for one, and
hand the result to the event channel.

Design decisions:
- One handler per entry in HOOK_TABLE, no per-hook code paths
- Handlers are stateless; all lookups go through the injected data store
- Channel errors are not caught here; the hook bus logs them
- A subscription id that resolves to nothing is logged and skipped

Payload shape:
    {
        "subscription": {"id": 42, "status": "active", "order": {"items": [...]}},
        "unique": {"key": "wc_order_abc"},          # include_unique hooks only
        "value": {"currency": "USD", "amount": 25.0} # payment hooks only
    }
"""

import logging
from typing import Any, Optional, Union

from shared.channels import RecordingChannel
from shared.data_store import DataStore, get_data_store
from shared.models import Subscription
from subscription_events.hook_bus import HookBus, HookHandler, get_hook_bus
from subscription_events.hooks import HOOK_TABLE, HookSpec, ValueSource

logger = logging.getLogger("subscription_events")


def build_details(
    subscription: Subscription,
    include_unique: bool,
    data_store: DataStore,
) -> dict[str, Any]:
    """
    Build the details payload for a subscription event.

    The unique key always comes from the checkout (parent) order, so every
    event about one subscription carries the same de-duplication token no
    matter how many renewals have happened since.

    Args:
        subscription: The subscription the event is about
        include_unique: Whether to add unique.key
        data_store: Accessor for cart items and the checkout order

    Returns:
        A new dict; the subscription is never modified
    """
    details: dict[str, Any] = {
        "subscription": {
            "id": subscription.id,
            "status": subscription.status,
            "order": {
                "items": data_store.get_cart_items(subscription),
            },
        },
    }

    if include_unique:
        parent = data_store.get_parent_order(subscription)
        if parent:
            details["unique"] = {"key": parent.order_key}

    return details


class SubscriptionEventMapper:
    """
    Hook-driven subscription event forwarder.

    Example:
        mapper = SubscriptionEventMapper(channel=RecordingChannel())
        mapper.start()

        # Every table hook fired on the bus now produces one event
        get_hook_bus().do_action(Hooks.STATUS_ACTIVE, subscription)
    """

    def __init__(
        self,
        hook_bus: Optional[HookBus] = None,
        data_store: Optional[DataStore] = None,
        channel=None,
        hook_table: Optional[dict[str, HookSpec]] = None,
    ):
        """
        Initialize the mapper.

        Args:
            hook_bus: Bus to listen on (defaults to singleton)
            data_store: Platform accessor (defaults to singleton)
            channel: Anything with send_event() (defaults to a RecordingChannel)
            hook_table: Hook mappings (defaults to HOOK_TABLE)
        """
        self.hook_bus = hook_bus or get_hook_bus()
        self.data_store = data_store or get_data_store()
        self.channel = channel or RecordingChannel()
        self.hook_table = HOOK_TABLE if hook_table is None else hook_table

        self._handlers: dict[str, HookHandler] = {}

    def start(self) -> None:
        """Register one handler per hook in the table."""
        if self._handlers:
            logger.warning("SubscriptionEventMapper already started")
            return

        for hook_name, spec in self.hook_table.items():
            handler = self._make_handler(spec)
            self.hook_bus.add_action(hook_name, handler)
            self._handlers[hook_name] = handler

        logger.info(f"SubscriptionEventMapper started - listening on {len(self._handlers)} hooks")

    def stop(self) -> None:
        """Remove every handler registered by start()."""
        if not self._handlers:
            return

        for hook_name, handler in self._handlers.items():
            self.hook_bus.remove_action(hook_name, handler)
        self._handlers.clear()

        logger.info("SubscriptionEventMapper stopped")

    @property
    def started(self) -> bool:
        return bool(self._handlers)

    def _make_handler(self, spec: HookSpec) -> HookHandler:
        def handler(subscription_or_id: Union[Subscription, int, str]) -> None:
            self.handle(spec, subscription_or_id)

        handler.__name__ = f"handle_{spec.hook_name}"
        return handler

    # =========================================================================
    # Event Handling
    # =========================================================================

    def handle(self, spec: HookSpec, subscription_or_id: Union[Subscription, int, str]) -> None:
        """
        Handle one hook firing.

        Steps:
        1. Resolve the subscription if the hook passed an id
        2. Resolve the owning user (guest if none)
        3. Build the details payload
        4. Attach `value` per the hook's value source
        5. Send the event
        """
        subscription = self._resolve_subscription(spec, subscription_or_id)
        if subscription is None:
            return

        logger.info(f"Handling {spec.hook_name}: subscription={subscription.id}")

        user_id = self.data_store.find_user_id(subscription)
        details = build_details(subscription, spec.include_unique, self.data_store)

        value = self._get_value(spec, subscription)
        if value is not None:
            details["value"] = value

        self.channel.send_event(
            user_id,
            spec.event_name,
            subscription.billing_email,
            details,
        )

    def _resolve_subscription(
        self,
        spec: HookSpec,
        subscription_or_id: Union[Subscription, int, str],
    ) -> Optional[Subscription]:
        if isinstance(subscription_or_id, Subscription):
            return subscription_or_id

        # Scheduled hooks can pass numeric strings
        try:
            subscription_id = int(subscription_or_id)
        except (TypeError, ValueError):
            logger.error(f"Invalid subscription id for {spec.hook_name}: {subscription_or_id!r}, skipping")
            return None

        subscription = self.data_store.get_subscription(subscription_id)
        if subscription is None:
            logger.error(
                f"Subscription not found for {spec.hook_name}: {subscription_or_id}, skipping"
            )
        return subscription

    def _get_value(self, spec: HookSpec, subscription: Subscription) -> Optional[dict[str, Any]]:
        """
        Work out the `value` object for a payment hook.

        Scheduled renewals report the subscription's recurring total, but
        only if the last order actually charged something. Completed and
        failed renewals report the last order's own total.
        """
        if spec.value_source == ValueSource.NONE:
            return None

        order = self.data_store.get_last_order(subscription)
        if order is None:
            return None

        if spec.value_source == ValueSource.SUBSCRIPTION:
            if order.total > 0:
                return {"currency": subscription.currency, "amount": subscription.total}
            return None

        return {"currency": order.currency, "amount": order.total}
