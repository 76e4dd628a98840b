"""
Hook table for the subscription event mapper.

Each platform hook the mapper listens to is described by one HookSpec:
the outbound event name, whether the hook passes an id or a full
subscription, whether the payload gets a unique key, and where the
monetary value comes from.

Naming:
- Hook names are the platform's own action names
- Event names are Bento's `$`-prefixed event types
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shared.models import SubscriptionStatus


class Hooks:
    """Platform hook names."""
    CHECKOUT_SUBSCRIPTION_CREATED = "woocommerce_checkout_subscription_created"
    STATUS_ACTIVE = "woocommerce_subscription_status_active"
    STATUS_PENDING_CANCEL = "woocommerce_subscription_status_pending-cancel"
    STATUS_CANCELLED = "woocommerce_subscription_status_cancelled"
    STATUS_EXPIRED = "woocommerce_subscription_status_expired"
    STATUS_ON_HOLD = "woocommerce_subscription_status_on-hold"
    SCHEDULED_TRIAL_END = "woocommerce_scheduled_subscription_trial_end"
    SCHEDULED_PAYMENT = "woocommerce_scheduled_subscription_payment"
    RENEWAL_PAYMENT_COMPLETE = "woocommerce_subscription_renewal_payment_complete"
    RENEWAL_PAYMENT_FAILED = "woocommerce_subscription_renewal_payment_failed"


class BentoEvents:
    """Outbound event names."""
    SUBSCRIPTION_CREATED = "$SubscriptionCreated"
    SUBSCRIPTION_ACTIVE = "$SubscriptionActive"
    SUBSCRIPTION_PENDING_CANCEL = "$SubscriptionPendingCancel"
    SUBSCRIPTION_CANCELLED = "$SubscriptionCancelled"
    SUBSCRIPTION_EXPIRED = "$SubscriptionExpired"
    SUBSCRIPTION_ON_HOLD = "$SubscriptionOnHold"
    SUBSCRIPTION_TRIAL_ENDED = "$SubscriptionTrialEnded"
    SUBSCRIPTION_RENEWED = "$SubscriptionRenewed"
    RENEWAL_PAYMENT_COMPLETE = "$SubscriptionRenewalPaymentComplete"
    RENEWAL_PAYMENT_FAILED = "$SubscriptionRenewalPaymentFailed"


class ValueSource(str, Enum):
    """Where a payload's `value` object comes from."""
    NONE = "none"
    # Subscription currency/total, only when the last order total is positive
    SUBSCRIPTION = "subscription"
    # Last order currency/total, whenever a last order exists
    LAST_ORDER = "last_order"


@dataclass(frozen=True)
class HookSpec:
    """
    How one platform hook maps to one outbound event.

    Attributes:
        hook_name: Platform hook to listen on
        event_name: Event sent for every firing
        passes_id: The hook passes a subscription id rather than the object
        include_unique: Add unique.key from the checkout order
        value_source: Where `value` comes from, if anywhere
        status: Status the platform sets just before firing this hook
    """
    hook_name: str
    event_name: str
    passes_id: bool = False
    include_unique: bool = False
    value_source: ValueSource = ValueSource.NONE
    status: Optional[SubscriptionStatus] = None


HOOK_TABLE: dict[str, HookSpec] = {
    spec.hook_name: spec
    for spec in (
        HookSpec(
            Hooks.CHECKOUT_SUBSCRIPTION_CREATED,
            BentoEvents.SUBSCRIPTION_CREATED,
            include_unique=True,
        ),
        HookSpec(
            Hooks.STATUS_ACTIVE,
            BentoEvents.SUBSCRIPTION_ACTIVE,
            include_unique=True,
            status=SubscriptionStatus.ACTIVE,
        ),
        HookSpec(
            Hooks.STATUS_PENDING_CANCEL,
            BentoEvents.SUBSCRIPTION_PENDING_CANCEL,
            include_unique=True,
            status=SubscriptionStatus.PENDING_CANCEL,
        ),
        HookSpec(
            Hooks.STATUS_CANCELLED,
            BentoEvents.SUBSCRIPTION_CANCELLED,
            include_unique=True,
            status=SubscriptionStatus.CANCELLED,
        ),
        HookSpec(
            Hooks.STATUS_EXPIRED,
            BentoEvents.SUBSCRIPTION_EXPIRED,
            include_unique=True,
            status=SubscriptionStatus.EXPIRED,
        ),
        HookSpec(
            Hooks.STATUS_ON_HOLD,
            BentoEvents.SUBSCRIPTION_ON_HOLD,
            include_unique=True,
            status=SubscriptionStatus.ON_HOLD,
        ),
        HookSpec(
            Hooks.SCHEDULED_TRIAL_END,
            BentoEvents.SUBSCRIPTION_TRIAL_ENDED,
            passes_id=True,
        ),
        HookSpec(
            Hooks.SCHEDULED_PAYMENT,
            BentoEvents.SUBSCRIPTION_RENEWED,
            passes_id=True,
            value_source=ValueSource.SUBSCRIPTION,
        ),
        HookSpec(
            Hooks.RENEWAL_PAYMENT_COMPLETE,
            BentoEvents.RENEWAL_PAYMENT_COMPLETE,
            include_unique=True,
            value_source=ValueSource.LAST_ORDER,
        ),
        HookSpec(
            Hooks.RENEWAL_PAYMENT_FAILED,
            BentoEvents.RENEWAL_PAYMENT_FAILED,
            value_source=ValueSource.LAST_ORDER,
        ),
    )
}


def get_hook_spec(hook_name: str) -> Optional[HookSpec]:
    """Look up a hook's mapping. Returns None for hooks we don't handle."""
    return HOOK_TABLE.get(hook_name)
