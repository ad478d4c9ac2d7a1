from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi import HTTPException

from crestron_home.application.dtos.command_dto import CommandRequestDTO
from crestron_home.application.dtos.device_dto import FieldWriteDTO
from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.domain.entities.device import Scene
from crestron_home.domain.entities.errors import TransportError
from crestron_home.presentation.controllers.devices_controller import (
    get_device,
    get_device_fields,
    get_devices,
    get_live_device,
    refresh_devices,
    send_command,
    set_device_field,
)
from tests.conftest import StubGateway, build_synchronizer


@pytest_asyncio.fixture()
async def synchronizer(sample_gateway: StubGateway) -> StateSynchronizer:
    synchronizer = build_synchronizer(sample_gateway)
    await synchronizer.refresh()
    return synchronizer


@pytest.mark.asyncio
async def test_get_devices_returns_snapshot(synchronizer: StateSynchronizer):
    response = await get_devices(device_type=None, state_synchronizer=synchronizer)

    assert response.count == 6
    assert response.refreshed_at == synchronizer.last_refreshed_at
    assert response.last_error is None
    assert [device.id for device in response.devices] == [10, 11, 12, 13, 200, 300]


@pytest.mark.asyncio
async def test_get_devices_filters_by_type(synchronizer: StateSynchronizer):
    response = await get_devices(device_type="Thermostat", state_synchronizer=synchronizer)

    assert response.count == 1
    assert response.devices[0].climate.current_temperature_celsius == 21.9


@pytest.mark.asyncio
async def test_refresh_devices_reports_failure(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.errors["rooms"] = TransportError("timeout")

    with pytest.raises(HTTPException) as exc_info:
        await refresh_devices(state_synchronizer=synchronizer)

    assert exc_info.value.status_code == 502
    assert len(synchronizer.devices) == 6


@pytest.mark.asyncio
async def test_refresh_devices_returns_new_snapshot(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.scenes.append(Scene(id=201, name="Morning", scene_type="Lighting"))

    response = await refresh_devices(state_synchronizer=synchronizer)

    assert response.count == 7


@pytest.mark.asyncio
async def test_get_device_by_id_and_type(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.scenes.append(Scene(id=10, name="Bright", scene_type="Lighting"))
    await synchronizer.refresh()

    dimmer = await get_device(device_id=10, device_type=None, state_synchronizer=synchronizer)
    scene = await get_device(
        device_id=10, device_type="Scene", state_synchronizer=synchronizer
    )

    assert dimmer.type == "Dimmer"
    assert scene.name == "Bright"


@pytest.mark.asyncio
async def test_get_unknown_device_is_404(synchronizer: StateSynchronizer):
    with pytest.raises(HTTPException) as exc_info:
        await get_device(device_id=999, device_type=None, state_synchronizer=synchronizer)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_live_device(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.scenes[0] = Scene(
        id=200, name="Evening", scene_type="Lighting", room_id=1, status=False
    )

    dto = await get_live_device(
        device_id=200, device_type=None, state_synchronizer=synchronizer
    )

    assert dto.status is False
    assert synchronizer.get_device(200).status is True


@pytest.mark.asyncio
async def test_get_live_device_transport_failure_is_502(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.errors["devices"] = TransportError("HTTP 500", status_code=500)

    with pytest.raises(HTTPException) as exc_info:
        await get_live_device(device_id=10, device_type=None, state_synchronizer=synchronizer)

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_send_command(synchronizer: StateSynchronizer, sample_gateway: StubGateway):
    sample_gateway.post_response = {"status": "success"}

    dto = await send_command(
        request=CommandRequestDTO(command="set_light_level", value=0),
        device_id=10,
        device_type=None,
        state_synchronizer=synchronizer,
    )

    assert dto.ok is True
    assert dto.command == "SetLightLevel"
    assert dto.response == {"status": "success"}
    assert sample_gateway.posts == [
        ("/Lights/SetState", {"lights": [{"id": 10, "level": 0, "time": 0}]})
    ]


@pytest.mark.asyncio
async def test_send_command_invalid_value_is_422(synchronizer: StateSynchronizer):
    with pytest.raises(HTTPException) as exc_info:
        await send_command(
            request=CommandRequestDTO(command="set_mode", value="Dry"),
            device_id=12,
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["nan", "inf"])
async def test_send_command_non_finite_temperature_is_422(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway, value: str
):
    with pytest.raises(HTTPException) as exc_info:
        await send_command(
            request=CommandRequestDTO(command="set_temperature", value=value),
            device_id=12,
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == 422
    assert sample_gateway.posts == []


@pytest.mark.asyncio
async def test_send_command_rejected_write_is_502(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.errors["post"] = TransportError("HTTP 500", status_code=500)

    with pytest.raises(HTTPException) as exc_info:
        await send_command(
            request=CommandRequestDTO(command="recall_scene"),
            device_id=200,
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_send_command_to_unknown_device_is_404(synchronizer: StateSynchronizer):
    with pytest.raises(HTTPException) as exc_info:
        await send_command(
            request=CommandRequestDTO(command="recall_scene"),
            device_id=999,
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_device_fields(synchronizer: StateSynchronizer):
    dto = await get_device_fields(
        device_id=300, device_type=None, state_synchronizer=synchronizer
    )

    assert dto.device_type == "DoorLock"
    assert dto.field_values["current_state"] == "Secured"
    assert dto.writable_fields == ["target_state"]


@pytest.mark.asyncio
async def test_set_device_field(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    dto = await set_device_field(
        body=FieldWriteDTO(value=1000),
        device_id=11,
        field="position",
        device_type=None,
        state_synchronizer=synchronizer,
    )

    assert dto.field_values == {"position": 1000}
    assert sample_gateway.posts == [
        ("/Shades/SetState", {"shades": [{"id": 11, "position": 1000}]})
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("device_id", "field", "value", "status_code"),
    [
        (11, "tilt", 1, 404),
        (12, "current_temperature", 30, 422),
        (300, "target_state", "Jammed", 422),
        (12, "fan_mode", "Turbo", 422),
    ],
)
async def test_set_device_field_errors(
    synchronizer: StateSynchronizer, device_id, field, value, status_code
):
    with pytest.raises(HTTPException) as exc_info:
        await set_device_field(
            body=FieldWriteDTO(value=value),
            device_id=device_id,
            field=field,
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_set_device_field_rejected_write_is_502(
    synchronizer: StateSynchronizer, sample_gateway: StubGateway
):
    sample_gateway.errors["post"] = TransportError("HTTP 500", status_code=500)

    with pytest.raises(HTTPException) as exc_info:
        await set_device_field(
            body=FieldWriteDTO(value=True),
            device_id=10,
            field="on",
            device_type=None,
            state_synchronizer=synchronizer,
        )

    assert exc_info.value.status_code == 502
