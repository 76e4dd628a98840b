"""
Subscription event mapper.

This package turns subscription platform hooks into Bento events:
- The hook bus delivers platform hooks to registered handlers
- The hook table says which event each hook produces
- The mapper builds the payload and hands it to an event channel
"""

from subscription_events.hook_bus import HookBus, HookCall, get_hook_bus, reset_hook_bus
from subscription_events.hooks import HOOK_TABLE, BentoEvents, Hooks, HookSpec, ValueSource
from subscription_events.mapper import SubscriptionEventMapper, build_details
from subscription_events.platform import SubscriptionPlatform

__all__ = [
    "HookBus",
    "HookCall",
    "get_hook_bus",
    "reset_hook_bus",
    "HOOK_TABLE",
    "BentoEvents",
    "Hooks",
    "HookSpec",
    "ValueSource",
    "SubscriptionEventMapper",
    "build_details",
    "SubscriptionPlatform",
]
