from __future__ import annotations

import pytest

from crestron_home.application.use_cases.health_use_cases import GetHealthStatusUseCase
from crestron_home.domain.entities.errors import TransportError
from crestron_home.domain.entities.health import ServiceStatus
from tests.conftest import StubGateway, build_synchronizer


@pytest.mark.asyncio
async def test_health_is_down_before_first_successful_pass() -> None:
    synchronizer = build_synchronizer(StubGateway())

    dto = await GetHealthStatusUseCase(state_synchronizer=synchronizer).execute()

    assert dto.status is ServiceStatus.DOWN
    assert dto.device_count == 0
    assert dto.running is False
    assert dto.last_refreshed_at is None


@pytest.mark.asyncio
async def test_health_is_up_after_successful_pass(sample_gateway: StubGateway) -> None:
    synchronizer = build_synchronizer(sample_gateway)
    await synchronizer.refresh()

    dto = await GetHealthStatusUseCase(state_synchronizer=synchronizer).execute()

    assert dto.status is ServiceStatus.UP
    assert dto.device_count == 6
    assert dto.last_refreshed_at == synchronizer.last_refreshed_at
    assert dto.last_error is None


@pytest.mark.asyncio
async def test_health_is_degraded_when_serving_kept_snapshot(
    sample_gateway: StubGateway,
) -> None:
    synchronizer = build_synchronizer(sample_gateway)
    await synchronizer.refresh()
    sample_gateway.errors["rooms"] = TransportError("timeout")
    await synchronizer.refresh()

    dto = await GetHealthStatusUseCase(state_synchronizer=synchronizer).execute()

    assert dto.status is ServiceStatus.DEGRADED
    assert dto.device_count == 6
    assert "rooms" in dto.last_error
