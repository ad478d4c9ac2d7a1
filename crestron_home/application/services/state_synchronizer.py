"""
State Synchronizer - Application Layer

Single owner of the canonical device list. Runs discovery passes on a
fixed interval, dispatches commands and pushes fresh devices to the
registered listeners.
"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from crestron_home.application.use_cases.command_use_cases import ApplyCommandUseCase
from crestron_home.application.use_cases.device_use_cases import (
    DiscoverDevicesUseCase,
    GetLiveDeviceUseCase,
)
from crestron_home.domain.entities.commands import CommandIntent, CommandResult
from crestron_home.domain.entities.device import CanonicalDevice
from crestron_home.domain.entities.errors import CommandError, DomainError
from crestron_home.domain.ports.capability import DeviceStateListener
from crestron_home.domain.ports.session_manager import ISessionManager
from crestron_home.shared import get_logger

logger = get_logger(__name__)


class StateSynchronizer:
    """
    Explicit client context with an ``open()``/``close()`` lifecycle.

    The device snapshot is an immutable tuple swapped as a whole after each
    successful pass; readers never observe a partially built list. Passes
    are serialized, and a timer tick that finds a pass in flight is
    skipped instead of queued.
    """

    def __init__(
        self,
        discover_devices_use_case: DiscoverDevicesUseCase,
        apply_command_use_case: ApplyCommandUseCase,
        get_live_device_use_case: GetLiveDeviceUseCase,
        session_manager: ISessionManager,
        refresh_interval: float = 30.0,
    ) -> None:
        if refresh_interval <= 0:
            raise ValueError("refresh_interval must be positive")

        self.discover_devices_use_case = discover_devices_use_case
        self.apply_command_use_case = apply_command_use_case
        self.get_live_device_use_case = get_live_device_use_case
        self.session_manager = session_manager
        self.refresh_interval = refresh_interval

        self._devices: Tuple[CanonicalDevice, ...] = ()
        self._last_error: Optional[DomainError] = None
        self._last_refreshed_at: Optional[datetime] = None
        self._listeners: List[DeviceStateListener] = []
        self._refresh_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task] = None
        self._timer_task: Optional[asyncio.Task] = None
        self._stopping = False

    @property
    def devices(self) -> Tuple[CanonicalDevice, ...]:
        return self._devices

    @property
    def last_error(self) -> Optional[DomainError]:
        """Error of the most recent pass, ``None`` after a successful one."""
        return self._last_error

    @property
    def last_refreshed_at(self) -> Optional[datetime]:
        return self._last_refreshed_at

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    def get_device(
        self, device_id: int, device_type: Optional[str] = None
    ) -> Optional[CanonicalDevice]:
        """First device with ``device_id``, optionally of one resolved type."""
        for device in self._devices:
            if device.id != device_id:
                continue
            if device_type is None or device.resolved_type == device_type:
                return device
        return None

    async def open(self) -> "StateSynchronizer":
        """Run the first discovery pass and start the refresh timer."""
        if self.is_running:
            return self

        self._stopping = False
        await self.refresh()
        self._timer_task = asyncio.create_task(self._run_timer())
        logger.info(
            "synchronizer.started",
            refresh_interval=self.refresh_interval,
            device_count=len(self._devices),
        )
        return self

    async def close(self) -> None:
        """Stop the timer, let an in-flight pass finish and drop the session."""
        self._stopping = True
        if self._timer_task is not None:
            self._timer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._timer_task
            self._timer_task = None

        if self._refresh_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._refresh_task
            self._refresh_task = None

        self.session_manager.invalidate()
        logger.info("synchronizer.stopped")

    async def __aenter__(self) -> "StateSynchronizer":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def refresh(self) -> Tuple[CanonicalDevice, ...]:
        """
        Run one discovery pass.

        Never raises: on failure the previous snapshot is kept and returned,
        and the error is exposed through ``last_error``.
        """
        async with self._refresh_lock:
            try:
                devices = await self.discover_devices_use_case.execute()
            except DomainError as e:
                self._last_error = e
                logger.warning(
                    "synchronizer.refresh.failed",
                    error_type=type(e).__name__,
                    error=e.message,
                    kept_devices=len(self._devices),
                )
                return self._devices
            except Exception as e:
                self._last_error = DomainError(
                    f"Unexpected refresh failure: {e}",
                    details={"error_type": type(e).__name__},
                )
                logger.exception("synchronizer.refresh.unexpected_error")
                return self._devices

            self._devices = tuple(devices)
            self._last_error = None
            self._last_refreshed_at = datetime.now(timezone.utc)
            logger.debug("synchronizer.refresh.completed", device_count=len(devices))

        self._notify_listeners(self._devices)
        return self._devices

    async def apply(self, intent: CommandIntent) -> CommandResult:
        """
        Send a command without touching the snapshot.

        Returns:
            CommandResult: ``ok=False`` with the error message when it failed
        """
        try:
            return await self.apply_command_use_case.execute(intent)
        except CommandError as e:
            return CommandResult(intent=intent, ok=False, error=e.message)

    async def refresh_device(
        self, device_id: int, device_type: Optional[str] = None
    ) -> Optional[CanonicalDevice]:
        """
        Read one device through its per-id endpoints.

        The shared snapshot is left untouched. Returns ``None`` for a device
        that is not part of the snapshot.

        Raises:
            TransportError: If a per-id read fails
        """
        device = self.get_device(device_id, device_type)
        if device is None:
            return None
        return await self.get_live_device_use_case.execute(device)

    def register(self, listener: DeviceStateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister(self, listener: DeviceStateListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def _notify_listeners(self, devices: Tuple[CanonicalDevice, ...]) -> None:
        # Ids are only unique per resolved type: a scene and a light may share one
        by_key: Dict[Tuple[int, str], CanonicalDevice] = {
            (device.id, device.resolved_type): device for device in devices
        }

        for listener in list(self._listeners):
            device = by_key.get((listener.device_id, listener.device_type))
            if device is None:
                continue
            try:
                listener.update_state(device)
            except Exception:
                logger.exception(
                    "synchronizer.listener.failed", device_id=listener.device_id
                )

    def _tick(self) -> None:
        if self._refresh_lock.locked() or (
            self._refresh_task is not None and not self._refresh_task.done()
        ):
            logger.debug("synchronizer.tick.skipped")
            return
        self._refresh_task = asyncio.create_task(self.refresh())

    async def _run_timer(self) -> None:
        while not self._stopping:
            await asyncio.sleep(self.refresh_interval)
            if self._stopping:
                return
            self._tick()
