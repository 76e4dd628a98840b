"""
Tests for event channels.

The recording channel is checked directly. The Bento HTTP channel is
checked against an httpx mock transport so no request leaves the process.
"""

import base64
import json

import httpx
import pytest

from shared.channels import (
    BentoHTTPChannel,
    RecordingChannel,
    build_event,
    get_channel,
)
from shared.config import Settings


DETAILS = {"subscription": {"id": 42, "status": "active", "order": {"items": []}}}


class TestRecordingChannel:
    """Tests for the in-memory channel."""

    def test_send_event_success(self, channel: RecordingChannel):
        result = channel.send_event(7, "$SubscriptionActive", "a@example.com", DETAILS)

        assert result.success is True
        assert result.user_id == 7
        assert result.event_name == "$SubscriptionActive"
        assert result.email == "a@example.com"
        assert result.details == DETAILS
        assert result.error is None

    def test_tracks_sent_events(self, channel: RecordingChannel):
        channel.send_event(1, "$SubscriptionActive", "a@example.com", {})
        channel.send_event(2, "$SubscriptionCancelled", "b@example.com", {})

        assert channel.get_sent_count() == 2
        assert [e.email for e in channel.sent_events] == ["a@example.com", "b@example.com"]

    def test_find_events(self, channel: RecordingChannel):
        channel.send_event(1, "$SubscriptionActive", "a@example.com", {})
        channel.send_event(2, "$SubscriptionCancelled", "b@example.com", {})
        channel.send_event(3, "$SubscriptionActive", "c@example.com", {})

        found = channel.find_events("$SubscriptionActive")

        assert [e.user_id for e in found] == [1, 3]

    def test_clear_history(self, channel: RecordingChannel):
        channel.send_event(1, "$SubscriptionActive", "a@example.com", {})

        channel.clear_history()

        assert channel.get_sent_count() == 0

    def test_simulated_failure(self):
        channel = RecordingChannel(fail_rate=1.0)

        result = channel.send_event(1, "$SubscriptionActive", "a@example.com", {})

        assert result.success is False
        assert result.error is not None
        assert channel.get_successful_sends() == []
        assert channel.get_sent_count() == 1

    def test_result_str(self, channel: RecordingChannel):
        result = channel.send_event(7, "$SubscriptionActive", "a@example.com", {})

        assert "$SubscriptionActive" in str(result)
        assert "a@example.com" in str(result)


class TestBuildEvent:
    """Tests for the Bento event body."""

    def test_registered_user_gets_fields(self):
        event = build_event(7, "$SubscriptionActive", "a@example.com", DETAILS)

        assert event == {
            "type": "$SubscriptionActive",
            "email": "a@example.com",
            "details": DETAILS,
            "fields": {"user_id": 7},
        }

    def test_guest_has_no_fields(self):
        event = build_event(0, "$SubscriptionActive", "a@example.com", DETAILS)

        assert "fields" not in event


class TestBentoHTTPChannel:
    """Tests for the HTTP channel."""

    @pytest.fixture
    def requests_seen(self):
        return []

    def _make_channel(self, requests_seen, status_code=200):
        def handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return httpx.Response(status_code, json={"results": 1})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        return BentoHTTPChannel(
            site_uuid="site-123",
            publishable_key="pub",
            secret_key="sec",
            api_base_url="https://bento.test/api/v1/",
            client=client,
        )

    def test_posts_batch_event(self, requests_seen):
        channel = self._make_channel(requests_seen)

        result = channel.send_event(7, "$SubscriptionCreated", "a@example.com", DETAILS)

        assert result.success is True
        assert len(requests_seen) == 1

        request = requests_seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/batch/events"
        assert request.url.params["site_uuid"] == "site-123"

        body = json.loads(request.content)
        assert body == {
            "events": [{
                "type": "$SubscriptionCreated",
                "email": "a@example.com",
                "details": DETAILS,
                "fields": {"user_id": 7},
            }]
        }

    def test_uses_basic_auth(self, requests_seen):
        channel = self._make_channel(requests_seen)

        channel.send_event(7, "$SubscriptionCreated", "a@example.com", DETAILS)

        expected = "Basic " + base64.b64encode(b"pub:sec").decode()
        assert requests_seen[0].headers["Authorization"] == expected

    def test_error_status_raises(self, requests_seen):
        channel = self._make_channel(requests_seen, status_code=500)

        with pytest.raises(httpx.HTTPStatusError):
            channel.send_event(7, "$SubscriptionCreated", "a@example.com", DETAILS)

    def test_missing_credentials(self):
        with pytest.raises(ValueError):
            BentoHTTPChannel(site_uuid="", publishable_key="pub", secret_key="sec")


class TestGetChannel:
    """Tests for channel selection from settings."""

    def test_dry_run_records(self):
        settings = Settings(dry_run=True, site_uuid="s", publishable_key="p", secret_key="k")

        assert isinstance(get_channel(settings), RecordingChannel)

    def test_missing_credentials_records(self):
        settings = Settings(dry_run=False, site_uuid="", publishable_key="", secret_key="")

        assert isinstance(get_channel(settings), RecordingChannel)

    def test_live_channel(self):
        settings = Settings(
            dry_run=False,
            site_uuid="s",
            publishable_key="p",
            secret_key="k",
            api_base_url="https://bento.test/api/v1",
        )

        channel = get_channel(settings)
        try:
            assert isinstance(channel, BentoHTTPChannel)
            assert channel.endpoint == "https://bento.test/api/v1/batch/events"
        finally:
            channel.close()
