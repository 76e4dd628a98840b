"""
JSON-backed platform data store.

Stands in for the subscription platform's read API: subscription lookup,
order lookup, cart items and user resolution. The real platform is an
external system; this store reads the same shapes from JSON fixtures.

Design decisions:
- Read-only apart from in-memory status updates used by demos
- Lazy loading, one fixture file per entity type
- Lookups return None for unknown ids rather than raising
"""

import json
from pathlib import Path
from typing import Optional

from shared.models import (
    GUEST_USER_ID,
    Order,
    Subscription,
)


class DataStore:
    """
    Read accessor over subscriptions and orders.

    This is the object the event mapper is given for every platform
    lookup, so tests can point it at their own fixtures.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Path to the directory containing subscriptions.json and
                     orders.json. Defaults to ./data relative to project root.
        """
        if data_dir is None:
            data_dir = Path(__file__).parent.parent / "data"

        self.data_dir = Path(data_dir)

        self._subscriptions: Optional[dict[int, Subscription]] = None
        self._orders: Optional[dict[int, Order]] = None

    # =========================================================================
    # Data Loading (lazy)
    # =========================================================================

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file."""
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r") as f:
            return json.load(f)

    def _ensure_subscriptions_loaded(self):
        if self._subscriptions is None:
            data = self._load_json("subscriptions.json")
            self._subscriptions = {s["id"]: Subscription(**s) for s in data}

    def _ensure_orders_loaded(self):
        if self._orders is None:
            data = self._load_json("orders.json")
            self._orders = {o["id"]: Order(**o) for o in data}

    # =========================================================================
    # Subscription Operations
    # =========================================================================

    def get_subscription(self, subscription_id: int) -> Optional[Subscription]:
        """Look up a subscription by id. Returns None if it doesn't exist."""
        self._ensure_subscriptions_loaded()
        return self._subscriptions.get(subscription_id)

    def get_subscriptions(self) -> list[Subscription]:
        """Get all subscriptions."""
        self._ensure_subscriptions_loaded()
        return list(self._subscriptions.values())

    def update_subscription_status(
        self,
        subscription_id: int,
        status: str,
    ) -> Optional[Subscription]:
        """
        Update a subscription's status (in-memory only).

        The platform changes status before firing its status hooks; demos and
        the HTTP surface use this to do the same.
        """
        self._ensure_subscriptions_loaded()
        subscription = self._subscriptions.get(subscription_id)
        if subscription:
            updated = Subscription(**{
                **subscription.model_dump(),
                "status": status,
            })
            self._subscriptions[subscription_id] = updated
            return updated
        return None

    # =========================================================================
    # Order Operations
    # =========================================================================

    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by id."""
        self._ensure_orders_loaded()
        return self._orders.get(order_id)

    def get_parent_order(self, subscription: Subscription) -> Optional[Order]:
        """
        Get the checkout order that created the subscription.

        Its order key is stable across renewals, which makes it the right
        de-duplication token for status events.
        """
        if subscription.parent_order_id is None:
            return None
        return self.get_order(subscription.parent_order_id)

    def get_last_order(self, subscription: Subscription) -> Optional[Order]:
        """
        Get the most recent order of any type (checkout or renewal).

        Order ids are assigned increasingly by the platform, so the highest
        known id is the latest. Ids without a stored order are ignored.
        """
        self._ensure_orders_loaded()
        orders = [
            self._orders[order_id]
            for order_id in subscription.get_order_ids()
            if order_id in self._orders
        ]
        if not orders:
            return None
        return max(orders, key=lambda o: o.id)

    # =========================================================================
    # Customer Resolution
    # =========================================================================

    def find_user_id(self, subscription: Subscription) -> int:
        """
        Resolve the account that owns a subscription.

        Checks the subscription itself, then its checkout order. Returns
        GUEST_USER_ID when no account is linked.
        """
        if subscription.customer_id != GUEST_USER_ID:
            return subscription.customer_id

        parent = self.get_parent_order(subscription)
        if parent and parent.customer_id != GUEST_USER_ID:
            return parent.customer_id

        return GUEST_USER_ID

    def get_cart_items(self, subscription: Subscription) -> list[dict]:
        """
        Summarize the subscription's line items for event payloads.

        Returned in line-item order. Each call builds fresh dicts.
        """
        return [
            {
                "product_id": item.product_id,
                "product_sku": item.sku,
                "product_name": item.name,
                "quantity": item.quantity,
                "line_total": item.total,
            }
            for item in subscription.line_items
        ]

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def reload(self):
        """Force reload all data from JSON files."""
        self._subscriptions = None
        self._orders = None


# Module-level singleton for convenience
# In tests, create a new DataStore instance with test fixtures
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        _default_store = DataStore()
    return _default_store
