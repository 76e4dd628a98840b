"""
Shared pytest fixtures for the subscription event mapper tests.

These fixtures provide consistent test data and fresh state for each test.

Fixture data (data/*.json):
- 101: registered customer 7, USD 25.00, checkout order 1001, renewal 1050 (USD 27.50)
- 102: guest, EUR 9.00, checkout order 1002 with a zero total (free trial)
- 103: no customer on the subscription, checkout order 1003 owned by customer 9,
       renewal 1080 charged in CAD
- 104: customer 11, no orders at all
"""

import json
from pathlib import Path

import pytest

from shared.channels import RecordingChannel
from shared.data_store import DataStore
from subscription_events.hook_bus import HookBus
from subscription_events.mapper import SubscriptionEventMapper
from subscription_events.platform import SubscriptionPlatform


@pytest.fixture
def data_dir() -> Path:
    """Path to the fixture data directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """Fresh DataStore over the fixture data for each test."""
    return DataStore(data_dir=data_dir)


@pytest.fixture
def make_store(tmp_path: Path):
    """
    Build a DataStore from inline fixtures.

    Usage:
        store = make_store(subscriptions=[{...}], orders=[{...}])
    """
    def _make(subscriptions=(), orders=()) -> DataStore:
        (tmp_path / "subscriptions.json").write_text(json.dumps(list(subscriptions)))
        (tmp_path / "orders.json").write_text(json.dumps(list(orders)))
        return DataStore(data_dir=tmp_path)

    return _make


@pytest.fixture
def channel() -> RecordingChannel:
    """Fresh recording channel that never fails."""
    return RecordingChannel(fail_rate=0.0)


@pytest.fixture
def hook_bus() -> HookBus:
    """Fresh hook bus for each test."""
    return HookBus()


@pytest.fixture
def mapper(hook_bus: HookBus, data_store: DataStore, channel: RecordingChannel):
    """Started mapper wired to the fresh bus, store and channel."""
    mapper = SubscriptionEventMapper(
        hook_bus=hook_bus,
        data_store=data_store,
        channel=channel,
    )
    mapper.start()
    yield mapper
    mapper.stop()


@pytest.fixture
def platform(hook_bus: HookBus, data_store: DataStore) -> SubscriptionPlatform:
    """Platform simulator firing hooks on the fresh bus."""
    return SubscriptionPlatform(hook_bus=hook_bus, data_store=data_store)


# =============================================================================
# Subscription Fixtures
# =============================================================================

@pytest.fixture
def alice_subscription_id() -> int:
    """Registered customer with a checkout order and one renewal order."""
    return 101


@pytest.fixture
def guest_subscription_id() -> int:
    """Guest checkout, free trial (last order total is zero)."""
    return 102


@pytest.fixture
def bob_subscription_id() -> int:
    """User resolved from the checkout order; renewal charged in CAD."""
    return 103


@pytest.fixture
def orderless_subscription_id() -> int:
    """Subscription with no checkout or renewal orders."""
    return 104
