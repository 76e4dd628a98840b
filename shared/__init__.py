"""
Shared infrastructure for the subscription event mapper.

- Platform models (Subscription, Order, LineItem)
- JSON-backed platform data store
- Event channels (recording and Bento HTTP)
- Settings
"""

from shared.models import (
    GUEST_USER_ID,
    LineItem,
    Order,
    Subscription,
    SubscriptionStatus,
)
from shared.data_store import DataStore
from shared.channels import BentoHTTPChannel, EventResult, RecordingChannel
from shared.config import Settings, get_settings

__all__ = [
    "GUEST_USER_ID",
    "LineItem",
    "Order",
    "Subscription",
    "SubscriptionStatus",
    "DataStore",
    "BentoHTTPChannel",
    "EventResult",
    "RecordingChannel",
    "Settings",
    "get_settings",
]
