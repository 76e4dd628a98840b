"""
Platform models for the subscription event mapper.

These models mirror the parts of WooCommerce Subscriptions that the mapper
reads. The platform owns these entities; we only ever read them.

Design decisions:
- Using Pydantic for validation and serialization
- Only the fields the mapper consumes are modelled
- Customer id 0 means a guest checkout (no linked account)
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


# Guest checkouts have no linked account
GUEST_USER_ID = 0


# =============================================================================
# Enums
# =============================================================================

class SubscriptionStatus(str, Enum):
    """
    Known subscription lifecycle states.

    The platform and its extensions can report others (e.g. "switched"), so
    Subscription.status is a plain string and these are just constants.
    The mapper never validates statuses or transitions between them.
    """
    CREATED = "created"
    PENDING = "pending"
    ACTIVE = "active"
    PENDING_CANCEL = "pending-cancel"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    ON_HOLD = "on-hold"
    TRIAL_ENDED = "trial-ended"
    RENEWED = "renewed"
    RENEWAL_FAILED = "renewal-failed"


# =============================================================================
# Platform Models
# =============================================================================

class LineItem(BaseModel):
    """A single product line on an order or subscription."""
    product_id: int = Field(..., description="Platform product id")
    sku: str = Field(default="", description="Product SKU")
    name: str = Field(..., description="Product display name")
    quantity: int = Field(default=1, ge=1)
    total: float = Field(default=0.0, ge=0, description="Line total")


class Order(BaseModel):
    """
    A checkout or renewal order.

    The order key is the platform's unique token for an order and is what
    downstream consumers use to de-duplicate events.
    """
    id: int = Field(..., description="Order id")
    order_key: str = Field(..., description="Unique order key, e.g. wc_order_abc")
    customer_id: int = Field(default=GUEST_USER_ID, description="0 for guest checkout")
    billing_email: str = Field(default="")
    currency: str = Field(default="USD")
    total: float = Field(default=0.0, ge=0)
    line_items: list[LineItem] = Field(default_factory=list)


class Subscription(BaseModel):
    """
    A subscription record.

    `parent_order_id` points at the checkout order that created the
    subscription. `related_order_ids` lists renewal orders, oldest first.
    """
    id: int = Field(..., description="Subscription id")
    status: str = Field(
        default=SubscriptionStatus.PENDING.value,
        description="Platform status, passed through unvalidated",
    )
    customer_id: int = Field(default=GUEST_USER_ID)
    billing_email: str = Field(..., description="Billing email address")
    currency: str = Field(default="USD")
    total: float = Field(default=0.0, ge=0, description="Recurring total")
    parent_order_id: Optional[int] = Field(default=None)
    related_order_ids: list[int] = Field(default_factory=list)
    line_items: list[LineItem] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, value):
        if isinstance(value, Enum):
            return value.value
        return value

    def get_order_ids(self) -> list[int]:
        """All associated order ids, checkout order first."""
        ids = []
        if self.parent_order_id is not None:
            ids.append(self.parent_order_id)
        ids.extend(i for i in self.related_order_ids if i != self.parent_order_id)
        return ids
