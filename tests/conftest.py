"""Common fixtures for SwitchBot client tests."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from switchbot_dashboard.access_tracker import RequestTracker
from switchbot_dashboard.infrastructure.api import RetryingDispatcher, SwitchBotClient
from switchbot_dashboard.infrastructure.rate_limiter import RateGate
from switchbot_dashboard.infrastructure.signing import RequestSigner
from switchbot_dashboard.models import Credentials, RetryPolicy
from switchbot_dashboard.switchbot_api import SwitchBotAPI

TEST_BASE_URL = "https://api.test.local/v1.1"


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        # Let other tasks run, like a real sleep would
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock():
    """Create a fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def credentials():
    """Create a test credential pair."""
    return Credentials(token="test-token", secret="test-secret")


@pytest.fixture
def make_response():
    """Factory for mock aiohttp responses."""

    def _make(status: int = 200, json_data=None, text: str = ""):
        response = MagicMock()
        response.status = status
        if isinstance(json_data, Exception):
            response.json = AsyncMock(side_effect=json_data)
        else:
            response.json = AsyncMock(return_value=json_data)
        response.text = AsyncMock(return_value=text)
        return response

    return _make


@pytest.fixture
def make_context():
    """Factory for the async context manager returned by session.request()."""

    def _make(response=None, exc: BaseException | None = None):
        context = MagicMock()
        if exc is not None:
            context.__aenter__ = AsyncMock(side_effect=exc)
        else:
            context.__aenter__ = AsyncMock(return_value=response)
        # __aexit__ must return False to not suppress exceptions
        context.__aexit__ = AsyncMock(return_value=False)
        return context

    return _make


@pytest.fixture
def make_session():
    """Factory for a mock aiohttp session answering with the given contexts in order."""

    def _make(*contexts):
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=list(contexts))
        return session

    return _make


@pytest.fixture
def make_client(credentials, fake_clock):
    """Factory for a fully wired client running on the fake clock."""

    def _make(session, *, max_retries: int = 3, min_interval: float = 10.0):
        tracker = RequestTracker(clock=fake_clock)
        rate_gate = RateGate(min_interval, clock=fake_clock, sleep=fake_clock.sleep, tracker=tracker)
        dispatcher = RetryingDispatcher(
            rate_gate,
            RetryPolicy(max_retries=max_retries, base_delay=1.0, max_delay=10.0),
            sleep=fake_clock.sleep,
        )
        signer = RequestSigner(
            credentials,
            clock=lambda: "1700000000000",
            nonce_factory=lambda: "test-nonce",
        )
        return SwitchBotClient(signer, dispatcher, TEST_BASE_URL, session=session)

    return _make


@pytest.fixture
def mock_client():
    """Create a mock SwitchBotClient for translator tests."""
    client = MagicMock(spec=SwitchBotClient)
    client.async_get = AsyncMock(return_value={"statusCode": 100, "body": {}, "message": "success"})
    client.async_post = AsyncMock(return_value={"statusCode": 100, "body": {}, "message": "success"})
    client.async_put = AsyncMock(return_value={"statusCode": 100, "body": {}, "message": "success"})
    client.async_delete = AsyncMock(return_value={"statusCode": 100, "body": {}, "message": "success"})
    client.async_health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def api(mock_client):
    """Create a SwitchBotAPI on top of the mock client."""
    return SwitchBotAPI(mock_client)


@pytest.fixture
def device_list_response():
    """Raw GET /devices response."""
    return {
        "statusCode": 100,
        "message": "success",
        "body": {
            "deviceList": [
                {
                    "deviceId": "HUB2-0001",
                    "deviceName": "Living Room Hub",
                    "deviceType": "Hub 2",
                    "enableCloudService": True,
                    "hubDeviceId": "",
                },
                {
                    "deviceId": "BULB-0001",
                    "deviceName": "Desk Lamp",
                    "deviceType": "Color Bulb",
                    "enableCloudService": True,
                    "hubDeviceId": "HUB2-0001",
                },
                {
                    "deviceId": "MYSTERY-01",
                    "deviceName": "Gadget",
                    "deviceType": "Meter Pro",
                    "enableCloudService": False,
                    "hubDeviceId": "HUB2-0001",
                },
            ],
            "infraredRemoteList": [
                {
                    "deviceId": "IR-AC-01",
                    "deviceName": "Bedroom AC",
                    "remoteType": "Air Conditioner",
                    "hubDeviceId": "HUB2-0001",
                },
                {
                    "deviceId": "IR-TV-01",
                    "deviceName": "TV",
                    "remoteType": "TV",
                    "hubDeviceId": "HUB2-0001",
                },
            ],
        },
    }
