"""
Tests for the hook table.
"""

import pytest

from subscription_events.hooks import (
    HOOK_TABLE,
    BentoEvents,
    Hooks,
    ValueSource,
    get_hook_spec,
)


class TestHookTable:

    def test_ten_hooks(self):
        assert len(HOOK_TABLE) == 10

    def test_keys_match_specs(self):
        for hook_name, spec in HOOK_TABLE.items():
            assert spec.hook_name == hook_name

    def test_event_names_unique(self):
        names = [spec.event_name for spec in HOOK_TABLE.values()]
        assert len(set(names)) == len(names)

    @pytest.mark.parametrize("hook_name, event_name, passes_id, include_unique, value_source", [
        (Hooks.CHECKOUT_SUBSCRIPTION_CREATED, BentoEvents.SUBSCRIPTION_CREATED, False, True, ValueSource.NONE),
        (Hooks.STATUS_ACTIVE, BentoEvents.SUBSCRIPTION_ACTIVE, False, True, ValueSource.NONE),
        (Hooks.STATUS_PENDING_CANCEL, BentoEvents.SUBSCRIPTION_PENDING_CANCEL, False, True, ValueSource.NONE),
        (Hooks.STATUS_CANCELLED, BentoEvents.SUBSCRIPTION_CANCELLED, False, True, ValueSource.NONE),
        (Hooks.STATUS_EXPIRED, BentoEvents.SUBSCRIPTION_EXPIRED, False, True, ValueSource.NONE),
        (Hooks.STATUS_ON_HOLD, BentoEvents.SUBSCRIPTION_ON_HOLD, False, True, ValueSource.NONE),
        (Hooks.SCHEDULED_TRIAL_END, BentoEvents.SUBSCRIPTION_TRIAL_ENDED, True, False, ValueSource.NONE),
        (Hooks.SCHEDULED_PAYMENT, BentoEvents.SUBSCRIPTION_RENEWED, True, False, ValueSource.SUBSCRIPTION),
        (Hooks.RENEWAL_PAYMENT_COMPLETE, BentoEvents.RENEWAL_PAYMENT_COMPLETE, False, True, ValueSource.LAST_ORDER),
        (Hooks.RENEWAL_PAYMENT_FAILED, BentoEvents.RENEWAL_PAYMENT_FAILED, False, False, ValueSource.LAST_ORDER),
    ])
    def test_mapping(self, hook_name, event_name, passes_id, include_unique, value_source):
        spec = get_hook_spec(hook_name)

        assert spec.event_name == event_name
        assert spec.passes_id is passes_id
        assert spec.include_unique is include_unique
        assert spec.value_source == value_source

    def test_status_hooks_set_status(self):
        assert get_hook_spec(Hooks.STATUS_ON_HOLD).status == "on-hold"
        assert get_hook_spec(Hooks.CHECKOUT_SUBSCRIPTION_CREATED).status is None

    def test_unknown_hook(self):
        assert get_hook_spec("woocommerce_order_status_completed") is None
