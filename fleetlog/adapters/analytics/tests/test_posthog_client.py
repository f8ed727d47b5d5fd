
"""Tests for PostHogBehavioralClient.

Most tests replace the PostHog SDK with a MagicMock so they can assert on the
exact SDK calls. TestSdkDelivery drives the real SDK with only its HTTP
transport patched.
"""

from unittest.mock import MagicMock, patch

import pytest
from posthog.request import APIError

from fleetlog.adapters.analytics.posthog import PostHogBehavioralClient
from fleetlog.core.config.enums import DeliveryMode
from fleetlog.core.exceptions import BehavioralAnalyticsError, NotLoggedInError


@pytest.fixture
def sdk() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(sdk) -> PostHogBehavioralClient:
    return PostHogBehavioralClient("phc_test", client=sdk)


def _sdk_methods(sdk: MagicMock) -> list[str]:
    return [c[0] for c in sdk.mock_calls]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_sync_delivery_enables_sync_mode(self):
        with patch("fleetlog.adapters.analytics.posthog.Posthog") as posthog_cls:
            tracker = PostHogBehavioralClient(
                "phc_test", host="https://ph.example.com", delivery=DeliveryMode.SYNC
            )

        posthog_cls.assert_called_once()
        args, kwargs = posthog_cls.call_args
        assert args == ("phc_test",)
        assert kwargs["host"] == "https://ph.example.com"
        assert kwargs["sync_mode"] is True
        assert kwargs["on_error"] == tracker._on_delivery_error

    def test_queued_delivery_is_default(self):
        with patch("fleetlog.adapters.analytics.posthog.Posthog") as posthog_cls:
            PostHogBehavioralClient("phc_test")

        assert posthog_cls.call_args.kwargs["sync_mode"] is False

    def test_starts_logged_out_with_anonymous_id(self, client):
        assert client.user_id is None
        assert client.anonymous_id


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIdentity:
    @pytest.mark.asyncio
    async def test_login_ensures_person_exists(self, client, sdk):
        await client.login("fake")

        assert client.user_id == "fake"
        sdk.set_once.assert_called_once_with(
            distinct_id="fake", properties={"distinct_id": "fake"}
        )

    @pytest.mark.asyncio
    async def test_signup_aliases_anonymous_id_before_login(self, client, sdk):
        anonymous_id = client.anonymous_id

        await client.signup("fake")

        assert _sdk_methods(sdk) == ["alias", "set_once"]
        sdk.alias.assert_called_once_with(previous_id=anonymous_id, distinct_id="fake")
        assert client.user_id == "fake"

    @pytest.mark.asyncio
    async def test_failed_alias_does_not_log_in(self, client, sdk):
        sdk.alias.side_effect = RuntimeError("alias rejected")

        with pytest.raises(BehavioralAnalyticsError):
            await client.signup("fake")

        assert client.user_id is None
        sdk.set_once.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout_forgets_identity_without_sdk_call(self, client, sdk):
        await client.login("fake")
        anonymous_id = client.anonymous_id
        sdk.reset_mock()

        await client.logout()

        assert client.user_id is None
        assert client.anonymous_id != anonymous_id
        assert sdk.mock_calls == []


# ---------------------------------------------------------------------------
# Profile properties
# ---------------------------------------------------------------------------


class TestProfile:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["set_user", "set_user_once"])
    async def test_requires_login(self, client, sdk, method):
        with pytest.raises(NotLoggedInError) as exc_info:
            await getattr(client, method)({"$email": "fake@example.com"})

        assert f"Please login() before using {method}()" in str(exc_info.value)
        assert sdk.mock_calls == []

    @pytest.mark.asyncio
    async def test_set_user(self, client, sdk):
        await client.login("fake")
        await client.set_user({"$email": "fake@example.com"})

        sdk.set.assert_called_once_with(
            distinct_id="fake", properties={"$email": "fake@example.com"}
        )

    @pytest.mark.asyncio
    async def test_set_user_once(self, client, sdk):
        await client.login("fake")
        sdk.reset_mock()

        await client.set_user_once({"$created": "2024-01-02T03:04:05+00:00"})

        sdk.set_once.assert_called_once_with(
            distinct_id="fake", properties={"$created": "2024-01-02T03:04:05+00:00"}
        )


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------


class TestTrack:
    @pytest.mark.asyncio
    async def test_track_logged_in(self, client, sdk):
        await client.login("fake")

        await client.track("[TEST] x", {"device_id": "abc"})

        sdk.capture.assert_called_once_with(
            distinct_id="fake", event="[TEST] x", properties={"device_id": "abc"}
        )

    @pytest.mark.asyncio
    async def test_track_logged_out_uses_anonymous_id(self, client, sdk):
        await client.track("[TEST] x")

        kwargs = sdk.capture.call_args.kwargs
        assert kwargs["distinct_id"] == client.anonymous_id
        assert kwargs["properties"] == {}

    @pytest.mark.asyncio
    async def test_track_does_not_mutate_caller_props(self, client):
        props = {"a": 1}
        await client.login("fake")
        await client.track("[TEST] x", props)

        assert props == {"a": 1}

    @pytest.mark.asyncio
    async def test_base_properties_are_merged_and_overridable(self, sdk):
        tracker = PostHogBehavioralClient(
            "phc_test", client=sdk, base_properties={"environment": "prd", "source": "base"}
        )

        await tracker.track("[TEST] x", {"source": "caller"})

        assert sdk.capture.call_args.kwargs["properties"] == {
            "environment": "prd",
            "source": "caller",
        }


# ---------------------------------------------------------------------------
# Error normalization
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_sdk_exception_becomes_behavioral_error(self, client, sdk):
        cause = RuntimeError("HTTP 401")
        sdk.capture.side_effect = cause

        with pytest.raises(BehavioralAnalyticsError) as exc_info:
            await client.track("[TEST] x")

        assert "capture" in exc_info.value.message
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, call",
        [
            ("capture", lambda c: c.track("[TEST] x")),
            ("alias", lambda c: c.signup("fake")),
            ("set_once", lambda c: c.login("fake")),
        ],
    )
    async def test_dropped_message_becomes_behavioral_error(self, client, sdk, method, call):
        getattr(sdk, method).return_value = None

        with pytest.raises(BehavioralAnalyticsError) as exc_info:
            await call(client)

        assert method in exc_info.value.message
        assert exc_info.value.__cause__ is None

    def test_queued_delivery_error_is_recorded(self, client):
        error = RuntimeError("batch rejected")

        client._on_delivery_error(error, [{"event": "[TEST] x"}])

        assert client.last_delivery_error is error

    @pytest.mark.asyncio
    async def test_shutdown_flushes_sdk(self, client, sdk):
        await client.shutdown()

        sdk.shutdown.assert_called_once_with()


# ---------------------------------------------------------------------------
# Delivery through the real SDK (network patched)
# ---------------------------------------------------------------------------


def _rejected() -> APIError:
    return APIError(401, "invalid project api key")


class TestSdkDelivery:
    @pytest.fixture(autouse=True)
    def legacy_capture(self, monkeypatch):
        monkeypatch.delenv("POSTHOG_CAPTURE_MODE", raising=False)

    @pytest.mark.asyncio
    async def test_sync_message_is_posted_inline(self):
        tracker = PostHogBehavioralClient(
            "phc_test", host="https://ph.example.com", delivery=DeliveryMode.SYNC
        )

        with patch("posthog.client.batch_post") as batch_post:
            await tracker.track("[TEST] x", {"device_id": "abc"})

        batch_post.assert_called_once()
        (message,) = batch_post.call_args.kwargs["batch"]
        assert message["event"] == "[TEST] x"
        assert message["distinct_id"] == tracker.anonymous_id
        assert message["properties"]["device_id"] == "abc"

    @pytest.mark.asyncio
    async def test_rejected_sync_message_raises(self):
        tracker = PostHogBehavioralClient(
            "phc_bad", host="https://ph.example.com", delivery=DeliveryMode.SYNC
        )

        with patch("posthog.client.batch_post", side_effect=_rejected()):
            with pytest.raises(BehavioralAnalyticsError) as exc_info:
                await tracker.track("[TEST] x")

        assert "capture" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rejected_sync_login_raises(self):
        tracker = PostHogBehavioralClient(
            "phc_bad", host="https://ph.example.com", delivery=DeliveryMode.SYNC
        )

        with patch("posthog.client.batch_post", side_effect=_rejected()):
            with pytest.raises(BehavioralAnalyticsError) as exc_info:
                await tracker.login("fake")

        assert "set_once" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_debug_sdk_error_is_chained(self):
        error = _rejected()
        tracker = PostHogBehavioralClient(
            "phc_bad", host="https://ph.example.com", delivery=DeliveryMode.SYNC, debug=True
        )

        with patch("posthog.client.batch_post", side_effect=error):
            with pytest.raises(BehavioralAnalyticsError) as exc_info:
                await tracker.track("[TEST] x")

        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_queued_failure_reaches_last_delivery_error(self):
        error = _rejected()
        tracker = PostHogBehavioralClient("phc_bad", host="https://ph.example.com")

        with patch("posthog.consumer.batch_post", side_effect=error) as batch_post:
            await tracker.track("[TEST] x")
            await tracker.shutdown()

        batch_post.assert_called_once()
        assert tracker.last_delivery_error is error
