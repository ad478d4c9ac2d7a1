from __future__ import annotations

from dataclasses import replace

import pytest
import pytest_asyncio

from crestron_home.application.services import capabilities as capabilities_module
from crestron_home.application.services.capabilities import (
    DoorLockCapability,
    LightCapability,
    SceneCapability,
    SecuritySystemCapability,
    ShadeCapability,
    ThermostatCapability,
    capability_for,
)
from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.domain.entities.device import SecurityExtension
from crestron_home.domain.entities.errors import CommandError, TransportError
from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    ThermostatMode,
)
from crestron_home.domain.ports.capability import DeviceCapability
from tests.conftest import RecordingLogger, StubGateway, build_synchronizer


@pytest_asyncio.fixture()
async def synchronizer(sample_gateway: StubGateway) -> StateSynchronizer:
    synchronizer = build_synchronizer(sample_gateway)
    await synchronizer.refresh()
    return synchronizer


def capability(synchronizer: StateSynchronizer, device_id: int, device_type: str):
    return capability_for(synchronizer.get_device(device_id, device_type), synchronizer)


@pytest.mark.asyncio
async def test_capability_for_picks_adapter(synchronizer: StateSynchronizer) -> None:
    assert isinstance(capability(synchronizer, 10, "Dimmer"), LightCapability)
    assert isinstance(capability(synchronizer, 11, "Shade"), ShadeCapability)
    assert isinstance(capability(synchronizer, 12, "Thermostat"), ThermostatCapability)
    assert isinstance(
        capability(synchronizer, 13, "SecuritySystem"), SecuritySystemCapability
    )
    assert isinstance(capability(synchronizer, 200, "Scene"), SceneCapability)
    assert isinstance(capability(synchronizer, 300, "DoorLock"), DoorLockCapability)
    assert isinstance(capability(synchronizer, 10, "Dimmer"), DeviceCapability)


@pytest.mark.asyncio
async def test_thermostat_fields(synchronizer: StateSynchronizer) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    assert thermostat.snapshot() == {
        "current_temperature": 21.9,
        "target_temperature": 21.1,
        "current_heating_cooling_state": ThermostatMode.COOL,
        "target_heating_cooling_state": ThermostatMode.COOL,
        "fan_mode": FanMode.AUTO,
        "temperature_display_units": "Celsius",
        "fault": False,
    }


@pytest.mark.asyncio
async def test_thermostat_target_follows_mode(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    await thermostat.set("target_heating_cooling_state", "Heat")
    await thermostat.set("target_temperature", 22)

    assert sample_gateway.posts == [
        ("/thermostats/mode", {"thermostats": [{"id": 12, "mode": "HEAT"}]}),
        (
            "/thermostats/SetPoint",
            {"id": 12, "setpoints": [{"type": "Heat", "temperature": 716}]},
        ),
    ]
    assert thermostat.get("target_temperature") == 22.0
    assert thermostat.get("current_heating_cooling_state") is ThermostatMode.HEAT


@pytest.mark.asyncio
async def test_thermostat_auto_reports_off_as_current_state(
    synchronizer: StateSynchronizer,
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    await thermostat.set("target_heating_cooling_state", ThermostatMode.AUTO)

    assert thermostat.get("target_heating_cooling_state") is ThermostatMode.AUTO
    assert thermostat.get("current_heating_cooling_state") is ThermostatMode.OFF


@pytest.mark.asyncio
async def test_thermostat_display_units_are_local(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    await thermostat.set("temperature_display_units", "Fahrenheit")

    assert sample_gateway.posts == []
    assert thermostat.get("temperature_display_units") == "Fahrenheit"


@pytest.mark.asyncio
async def test_thermostat_keeps_target_when_setpoints_disappear(
    synchronizer: StateSynchronizer,
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")
    device = synchronizer.get_device(12)

    thermostat.update_state(
        replace(device, climate=replace(device.climate, set_points=()))
    )

    assert thermostat.get("target_temperature") == 21.1


@pytest.mark.asyncio
async def test_failed_write_reverts_local_value(
    synchronizer: StateSynchronizer,
    sample_gateway: StubGateway,
    monkeypatch: pytest.MonkeyPatch,
    recording_logger: RecordingLogger,
) -> None:
    monkeypatch.setattr(capabilities_module, "logger", recording_logger)
    thermostat = capability(synchronizer, 12, "Thermostat")
    sample_gateway.errors["post"] = TransportError("HTTP 500", status_code=500)

    with pytest.raises(CommandError, match="HTTP 500"):
        await thermostat.set("fan_mode", FanMode.ON)

    assert thermostat.get("fan_mode") is FanMode.AUTO
    assert recording_logger.events("warning") == ["capability.write.reverted"]


@pytest.mark.asyncio
async def test_read_only_and_unknown_fields(synchronizer: StateSynchronizer) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    with pytest.raises(CommandError, match="read-only"):
        await thermostat.set("current_temperature", 30)
    with pytest.raises(KeyError):
        thermostat.get("humidity")


@pytest.mark.asyncio
async def test_invalid_value_is_rejected_before_sending(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    with pytest.raises(CommandError) as exc_info:
        await thermostat.set("fan_mode", "Turbo")

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert sample_gateway.posts == []


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [float("nan"), float("inf"), "nan"])
async def test_non_finite_target_temperature_is_rejected(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway, value
) -> None:
    thermostat = capability(synchronizer, 12, "Thermostat")

    with pytest.raises(CommandError) as exc_info:
        await thermostat.set("target_temperature", value)

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert thermostat.get("target_temperature") == 21.1
    assert sample_gateway.posts == []


@pytest.mark.asyncio
async def test_door_lock(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    lock = capability(synchronizer, 300, "DoorLock")
    assert lock.get("current_state") is LockState.SECURED
    assert lock.get("target_state") is LockState.SECURED

    await lock.set("target_state", LockState.UNSECURED)

    assert sample_gateway.posts == [("/doorlocks/unlock/300", None)]
    assert lock.get("current_state") is LockState.UNSECURED


@pytest.mark.asyncio
async def test_door_lock_rejects_jammed_target(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    lock = capability(synchronizer, 300, "DoorLock")

    with pytest.raises(CommandError) as exc_info:
        await lock.set("target_state", "Jammed")

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert sample_gateway.posts == []
    assert lock.get("target_state") is LockState.SECURED


@pytest.mark.asyncio
async def test_security_system(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    panel = capability(synchronizer, 13, "SecuritySystem")

    assert panel.get("current_state") is SecurityState.STAY_ARMED
    assert set(panel.get("available_targets")) == {
        SecurityState.DISARMED,
        SecurityState.STAY_ARMED,
        SecurityState.AWAY_ARMED,
    }
    assert panel.get("alarm_triggered") is False

    await panel.set("target_state", "AwayArmed")

    assert sample_gateway.posts == [("/securitydevices/13", {"state": "ArmAway"})]


@pytest.mark.asyncio
async def test_security_alarm_keeps_last_target(synchronizer: StateSynchronizer) -> None:
    panel = capability(synchronizer, 13, "SecuritySystem")
    device = synchronizer.get_device(13)

    panel.update_state(
        replace(
            device,
            security=SecurityExtension(
                id=13, current_state="Alarm", connection_status="offline"
            ),
        )
    )

    assert panel.get("current_state") is SecurityState.ALARM_TRIGGERED
    assert panel.get("target_state") is SecurityState.STAY_ARMED
    assert panel.get("alarm_triggered") is True
    assert panel.get("fault") is True

    with pytest.raises(CommandError):
        await panel.set("target_state", SecurityState.ALARM_TRIGGERED)


@pytest.mark.asyncio
async def test_light_on_and_level(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    light = capability(synchronizer, 10, "Dimmer")
    assert light.snapshot() == {"on": True, "level": 32768}

    await light.set("on", False)
    await light.set("level", 65535)

    assert sample_gateway.posts == [
        ("/Lights/SetState", {"lights": [{"id": 10, "level": 0, "time": 0}]}),
        ("/Lights/SetState", {"lights": [{"id": 10, "level": 65535, "time": 0}]}),
    ]
    assert light.snapshot() == {"on": True, "level": 65535}


@pytest.mark.asyncio
async def test_shade_out_of_range_is_reverted(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    shade = capability(synchronizer, 11, "Shade")

    with pytest.raises(CommandError):
        await shade.set("position", 70000)

    assert shade.get("position") == 40000
    assert sample_gateway.posts == []


@pytest.mark.asyncio
async def test_scene_recall(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    scene = capability(synchronizer, 200, "Scene")

    await scene.set("active", False)
    await scene.set("active", True)

    assert sample_gateway.posts == [("/SCENES/RECALL/200", None)]
    assert scene.get("active") is True


@pytest.mark.asyncio
async def test_registered_capability_follows_refresh(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
) -> None:
    shade = capability(synchronizer, 11, "Shade")
    synchronizer.register(shade)
    sample_gateway.shades = [replace(sample_gateway.shades[0], position=5)]

    await synchronizer.refresh()

    assert shade.get("position") == 5
