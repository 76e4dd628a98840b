"""
Tests for the platform models.
"""

import pytest
from pydantic import ValidationError

from shared.models import (
    GUEST_USER_ID,
    LineItem,
    Order,
    Subscription,
    SubscriptionStatus,
)


class TestSubscription:
    """Tests for the Subscription model."""

    def test_defaults(self):
        subscription = Subscription(id=1, billing_email="a@example.com")

        assert subscription.status == "pending"
        assert subscription.customer_id == GUEST_USER_ID
        assert subscription.parent_order_id is None
        assert subscription.line_items == []

    def test_status_stored_as_string(self):
        subscription = Subscription(
            id=1,
            billing_email="a@example.com",
            status=SubscriptionStatus.PENDING_CANCEL,
        )

        assert subscription.status == "pending-cancel"

    def test_created_status(self):
        subscription = Subscription(
            id=1,
            billing_email="a@example.com",
            status=SubscriptionStatus.CREATED,
        )

        assert subscription.status == "created"

    def test_custom_status_passes_through(self):
        subscription = Subscription(id=1, billing_email="a@example.com", status="switched")

        assert subscription.status == "switched"

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            Subscription(id=1, billing_email="a@example.com", total=-1)

    def test_order_ids_parent_first(self):
        subscription = Subscription(
            id=1,
            billing_email="a@example.com",
            parent_order_id=10,
            related_order_ids=[12, 10, 15],
        )

        assert subscription.get_order_ids() == [10, 12, 15]

    def test_order_ids_without_parent(self):
        subscription = Subscription(id=1, billing_email="a@example.com", related_order_ids=[3])

        assert subscription.get_order_ids() == [3]


class TestOrder:
    """Tests for the Order and LineItem models."""

    def test_order_requires_key(self):
        with pytest.raises(ValidationError):
            Order(id=1)

    def test_line_item_quantity_positive(self):
        with pytest.raises(ValidationError):
            LineItem(product_id=1, name="Thing", quantity=0)

    def test_order_defaults(self):
        order = Order(id=1, order_key="wc_order_x")

        assert order.customer_id == GUEST_USER_ID
        assert order.currency == "USD"
        assert order.total == 0.0
