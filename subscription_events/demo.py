"""
Demonstration scripts for the subscription event mapper.

These functions fire platform hooks against the fixture data and print the
events that would be sent to Bento.
"""

import logging

from shared.channels import RecordingChannel
from shared.data_store import DataStore
from subscription_events.hook_bus import reset_hook_bus
from subscription_events.hooks import Hooks
from subscription_events.mapper import SubscriptionEventMapper
from subscription_events.platform import SubscriptionPlatform

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)


def _setup():
    hook_bus = reset_hook_bus()
    data_store = DataStore()
    channel = RecordingChannel()

    mapper = SubscriptionEventMapper(
        hook_bus=hook_bus,
        data_store=data_store,
        channel=channel,
    )
    platform = SubscriptionPlatform(hook_bus=hook_bus, data_store=data_store)
    mapper.start()
    return mapper, platform, channel


def _print_sent(channel: RecordingChannel):
    print("\nEvents sent:")
    for result in channel.sent_events:
        print(f"  {result}")
        print(f"    details={result.details}")


def run_lifecycle_demo():
    """
    Walk one subscription through checkout, renewals and cancellation.

    Subscription 101 belongs to a registered customer and has one renewal
    order on file.
    """
    print("\n" + "=" * 70)
    print("DEMO: Subscription lifecycle (subscription 101)")
    print("=" * 70 + "\n")

    mapper, platform, channel = _setup()

    for hook_name in (
        Hooks.CHECKOUT_SUBSCRIPTION_CREATED,
        Hooks.STATUS_ACTIVE,
        Hooks.SCHEDULED_PAYMENT,
        Hooks.RENEWAL_PAYMENT_COMPLETE,
        Hooks.STATUS_PENDING_CANCEL,
        Hooks.STATUS_CANCELLED,
    ):
        print(f"\nACTION: firing {hook_name}")
        platform.fire(hook_name, 101)

    _print_sent(channel)
    mapper.stop()
    return channel.sent_events


def run_guest_trial_demo():
    """
    A guest checkout with a free trial.

    The trial-end and renewal-due hooks pass only the id. The last order
    total is zero, so the renewal-due event carries no value.
    """
    print("\n" + "=" * 70)
    print("DEMO: Guest trial (subscription 102)")
    print("=" * 70 + "\n")

    mapper, platform, channel = _setup()

    platform.fire(Hooks.CHECKOUT_SUBSCRIPTION_CREATED, 102)
    platform.fire(Hooks.SCHEDULED_TRIAL_END, 102)
    platform.fire(Hooks.SCHEDULED_PAYMENT, 102)

    _print_sent(channel)
    mapper.stop()
    return channel.sent_events


def run_failed_payment_demo():
    """
    A renewal payment fails and the subscription goes on hold, then expires.
    """
    print("\n" + "=" * 70)
    print("DEMO: Failed renewal (subscription 103)")
    print("=" * 70 + "\n")

    mapper, platform, channel = _setup()

    platform.fire(Hooks.RENEWAL_PAYMENT_FAILED, 103)
    platform.fire(Hooks.STATUS_ON_HOLD, 103)
    platform.fire(Hooks.STATUS_EXPIRED, 103)

    _print_sent(channel)
    mapper.stop()
    return channel.sent_events


if __name__ == "__main__":
    run_lifecycle_demo()
    run_guest_trial_demo()
    run_failed_payment_demo()
