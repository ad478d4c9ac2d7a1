"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.application.use_cases.collection_fetcher import CollectionFetcher
from crestron_home.application.use_cases.command_use_cases import ApplyCommandUseCase
from crestron_home.application.use_cases.device_use_cases import (
    DiscoverDevicesUseCase,
    GetLiveDeviceUseCase,
)
from crestron_home.application.use_cases.health_use_cases import (
    GetHealthStatusUseCase,
)
from crestron_home.infrastructure.gateways.crestron_gateway import (
    CrestronGateway,
    build_base_url,
)
from crestron_home.infrastructure.services.session_manager import SessionManager
from crestron_home.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    base_url = providers.Callable(build_base_url, config.crestron.host)

    # Infrastructure
    session_manager = providers.Singleton(
        SessionManager,
        base_url=base_url,
        api_token=config.crestron.api_token,
        ttl=config.crestron.session_ttl,
        safety_margin=config.crestron.session_safety_margin,
        timeout=config.crestron.request_timeout,
        verify_ssl=config.crestron.verify_ssl,
    )

    # Gateways
    crestron_gateway = providers.Singleton(
        CrestronGateway,
        base_url=base_url,
        session_manager=session_manager,
        timeout=config.crestron.request_timeout,
        verify_ssl=config.crestron.verify_ssl,
    )

    # Application (use cases)
    collection_fetcher = providers.Factory(
        CollectionFetcher,
        crestron_gateway=crestron_gateway,
    )

    discover_devices_use_case = providers.Factory(
        DiscoverDevicesUseCase,
        session_manager=session_manager,
        collection_fetcher=collection_fetcher,
        enabled_types=config.crestron.enabled_types,
    )

    get_live_device_use_case = providers.Factory(
        GetLiveDeviceUseCase,
        collection_fetcher=collection_fetcher,
    )

    apply_command_use_case = providers.Factory(
        ApplyCommandUseCase,
        crestron_gateway=crestron_gateway,
    )

    # The single owner of the device snapshot
    state_synchronizer = providers.Singleton(
        StateSynchronizer,
        discover_devices_use_case=discover_devices_use_case,
        apply_command_use_case=apply_command_use_case,
        get_live_device_use_case=get_live_device_use_case,
        session_manager=session_manager,
        refresh_interval=config.crestron.refresh_interval,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        state_synchronizer=state_synchronizer,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for the controller link.

    Opens the state synchronizer (first discovery pass and refresh timer)
    on startup and closes it on shutdown. A controller that is unreachable
    at startup does not prevent the application from starting: the
    synchronizer keeps retrying on its timer.
    """
    container = get_container()
    synchronizer = container.state_synchronizer()

    try:
        logger.info("container.synchronizer.open")
        await synchronizer.open()
        logger.info(
            "container.resources.initialized",
            device_count=len(synchronizer.devices),
            last_error=(
                synchronizer.last_error.message if synchronizer.last_error else None
            ),
        )
        yield container

    finally:
        logger.info("container.synchronizer.close")
        await synchronizer.close()
        logger.info("container.resources.shutdown")
