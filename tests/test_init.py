"""Tests for client stack setup."""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from switchbot_dashboard import SwitchBotAPI, async_setup, build_api
from switchbot_dashboard.config import SwitchBotSettings
from switchbot_dashboard.infrastructure.errors import SwitchBotConfigError


@pytest.fixture
def settings():
    return SwitchBotSettings(
        token="test-token",
        secret="test-secret",
        min_request_interval=5.0,
        max_retries=2,
        daily_request_quota=500,
    )


def test_build_api_wires_one_stack(settings):
    """Test settings flow into every component of the stack."""
    api = build_api(settings)

    assert isinstance(api, SwitchBotAPI)
    client = api.client
    assert client.base_url == "https://api.switch-bot.com/v1.1"
    assert client.request_timeout == 30.0
    assert client.signer.credentials.token == "test-token"
    assert client.dispatcher.retry_policy.max_retries == 2
    assert client.dispatcher.rate_gate.min_interval == 5.0
    assert client.dispatcher.rate_gate.tracker.daily_quota == 500


def test_build_api_gates_are_independent(settings):
    """Test each built stack owns its gate; call sites share one by sharing the API."""
    first = build_api(settings)
    second = build_api(settings)

    assert first.client.dispatcher.rate_gate is not second.client.dispatcher.rate_gate


def test_build_api_missing_credentials():
    with pytest.raises(SwitchBotConfigError):
        build_api(SwitchBotSettings(token="", secret=""))


@pytest.mark.asyncio
async def test_async_setup_connected(settings, caplog):
    """Test async_setup returns the API after a successful connection check."""
    caplog.set_level(logging.INFO)
    with patch.object(SwitchBotAPI, "async_test_connection", AsyncMock(return_value=True)):
        api = await async_setup(settings)

    assert isinstance(api, SwitchBotAPI)
    assert "Connected to SwitchBot API" in caplog.text


@pytest.mark.asyncio
async def test_async_setup_unreachable(settings, caplog):
    """Test an unreachable API is logged but does not fail setup."""
    with patch.object(SwitchBotAPI, "async_test_connection", AsyncMock(return_value=False)):
        api = await async_setup(settings)

    assert isinstance(api, SwitchBotAPI)
    assert "not reachable" in caplog.text
