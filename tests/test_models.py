"""Tests for data models in models.py"""

import pytest
from pydantic import ValidationError

from switchbot_dashboard.constants import AirConditionerMode, DeviceType, FanSpeed
from switchbot_dashboard.models import (
    AirConditionerState,
    Credentials,
    Device,
    DeviceCommand,
    DeviceListResponse,
    EnvironmentData,
    RetryPolicy,
    SignedHeaders,
    filter_devices,
    group_devices_by_type,
)


class TestCredentials:
    """Tests for Credentials model."""

    def test_frozen(self):
        credentials = Credentials(token="t", secret="s")
        with pytest.raises(ValidationError):
            credentials.token = "other"

    def test_secret_hidden_from_repr(self):
        assert "super-secret" not in repr(Credentials(token="t", secret="super-secret"))


class TestSignedHeaders:
    """Tests for SignedHeaders model."""

    def test_as_headers_uses_wire_names(self):
        headers = SignedHeaders(authorization="tok", signature="sig", timestamp="1", nonce="n")

        assert headers.as_headers() == {
            "Authorization": "tok",
            "sign": "sig",
            "t": "1",
            "nonce": "n",
            "Content-Type": "application/json",
        }


class TestRetryPolicy:
    """Tests for RetryPolicy model."""

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicy(max_retries=-1)
        with pytest.raises(ValidationError):
            RetryPolicy(base_delay=-1.0)

    def test_delay_for(self):
        policy = RetryPolicy(base_delay=0.5, max_delay=3.0)
        assert [policy.delay_for(n) for n in range(4)] == [0.5, 1.0, 2.0, 3.0]


class TestDeviceCommand:
    """Tests for DeviceCommand model."""

    def test_payload_without_parameter(self):
        assert DeviceCommand(device_id="A", command="turnOn").payload() == {"command": "turnOn"}

    def test_payload_with_dict_parameter(self):
        command = DeviceCommand(device_id="A", command="setAll", parameter={"temperature": 22})
        assert command.payload() == {"command": "setAll", "parameter": {"temperature": 22}}

    def test_empty_command_rejected(self):
        with pytest.raises(ValidationError):
            DeviceCommand(device_id="A", command="")


class TestAirConditionerState:
    """Tests for AirConditionerState model."""

    def test_defaults(self):
        state = AirConditionerState()

        assert state.to_parameter() == {"temperature": 25, "mode": "auto", "fanSpeed": "auto", "power": "on"}

    def test_to_parameter(self):
        state = AirConditionerState(temperature=18.5, mode=AirConditionerMode.COOL, fan_speed=FanSpeed.LOW)

        assert state.to_parameter() == {"temperature": 18.5, "mode": "cool", "fanSpeed": "low", "power": "on"}


class TestEnvironmentData:
    """Tests for EnvironmentData model."""

    def test_from_status_body(self):
        data = EnvironmentData.from_status_body({"temperature": 23.1, "humidity": 40, "lightLevel": 12})

        assert data.temperature == 23.1
        assert data.humidity == 40
        assert data.light_level == 12

    @pytest.mark.parametrize("body", [None, {}, "text", {"temperature": None}])
    def test_missing_readings_are_zero(self, body):
        data = EnvironmentData.from_status_body(body)

        assert (data.temperature, data.humidity, data.light_level) == (0, 0, 0)


class TestDevice:
    """Tests for Device model."""

    def test_from_api_dict(self):
        device = Device.from_api_dict(
            {
                "deviceId": "BULB-1",
                "deviceName": "Desk Lamp",
                "deviceType": "Color Bulb",
                "enableCloudService": True,
                "hubDeviceId": "",
            }
        )

        assert device.device_type is DeviceType.LIGHT
        assert device.hub_device_id is None
        assert device.is_controllable is True
        assert device.display_name == "Desk Lamp (Light)"

    def test_from_infrared_dict(self):
        device = Device.from_infrared_dict(
            {
                "deviceId": "IR-1",
                "deviceName": "Bedroom AC",
                "remoteType": "Air Conditioner",
                "hubDeviceId": "H",
            }
        )

        assert device.device_type is DeviceType.AIR_CONDITIONER
        assert device.is_infrared_remote is True
        assert device.display_name == "Bedroom AC (Air Conditioner (IR))"

    def test_unknown_types(self):
        physical = Device.from_api_dict({"deviceId": "X", "deviceName": "X", "deviceType": "Robot Vacuum"})
        remote = Device.from_infrared_dict({"deviceId": "Y", "deviceName": "Y", "remoteType": "TV"})

        assert physical.device_type is DeviceType.UNKNOWN
        assert remote.device_type is DeviceType.UNKNOWN
        assert physical.is_controllable is False

    @pytest.mark.parametrize(
        "raw",
        [
            {"deviceName": "No id", "deviceType": "Bot"},
            {"deviceId": "A", "deviceType": "Bot"},
            {"deviceId": "A", "deviceName": "No type"},
            {"deviceId": 7, "deviceName": "Bad id", "deviceType": "Bot"},
            "not a dict",
        ],
    )
    def test_malformed_entries(self, raw):
        assert Device.from_api_dict(raw) is None

    def test_hub_is_environment_source(self):
        hub = Device.from_api_dict({"deviceId": "H", "deviceName": "Hub", "deviceType": "Hub Mini"})

        assert hub.is_environment_source is True
        assert hub.is_controllable is False


class TestDeviceListResponse:
    """Tests for DeviceListResponse model."""

    def test_from_api(self, device_list_response):
        response = DeviceListResponse.from_api(device_list_response)

        assert len(response.devices) == 5

    def test_invalid_entries_skipped(self, caplog):
        response = DeviceListResponse.from_api(
            {
                "statusCode": 100,
                "body": {
                    "deviceList": [
                        {"deviceId": "A"},
                        {"deviceId": "B", "deviceName": "B", "deviceType": "Bot"},
                    ],
                    "infraredRemoteList": [{"deviceName": "no id", "remoteType": "Light"}],
                },
            }
        )

        assert [device.device_id for device in response.devices] == ["B"]
        assert "Skipping invalid device entry" in caplog.text
        assert "Skipping invalid infrared remote entry" in caplog.text

    @pytest.mark.parametrize("payload", [None, {}, {"body": None}, {"body": {"deviceList": None}}])
    def test_empty_payloads(self, payload):
        assert DeviceListResponse.from_api(payload).devices == []


class TestDeviceFilters:
    """Tests for filter_devices and group_devices_by_type."""

    @pytest.fixture
    def devices(self, device_list_response):
        return DeviceListResponse.from_api(device_list_response).devices

    def test_filter_by_type(self, devices):
        lights = filter_devices(devices, device_type=DeviceType.LIGHT)
        assert [device.device_id for device in lights] == ["BULB-0001"]

    def test_controllable_only(self, devices):
        controllable = filter_devices(devices, controllable_only=True)
        assert [device.device_id for device in controllable] == ["BULB-0001", "IR-AC-01"]

    def test_environment_only(self, devices):
        sources = filter_devices(devices, environment_only=True)
        assert [device.device_id for device in sources] == ["HUB2-0001"]

    def test_group_by_type(self, devices):
        grouped = group_devices_by_type(devices)

        assert set(grouped) == set(DeviceType)
        assert [device.device_id for device in grouped[DeviceType.UNKNOWN]] == ["MYSTERY-01", "IR-TV-01"]
        assert grouped[DeviceType.CURTAIN] == []
