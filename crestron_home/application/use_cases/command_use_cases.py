"""
Command Use Cases - Application Layer

Translates command intents to the controller's wire format and issues
exactly one write per intent. Commands never trigger a refresh; the next
scheduled poll reconciles the device state.
"""

from typing import Any, Optional, Tuple

from dependency_injector.wiring import Provide, inject

from crestron_home.domain.entities.commands import (
    CommandIntent,
    CommandResult,
    RecallScene,
    SetFanMode,
    SetLightLevel,
    SetLockState,
    SetMode,
    SetSecurityState,
    SetShadePosition,
    SetTemperature,
)
from crestron_home.domain.entities.errors import AuthError, CommandError, TransportError
from crestron_home.domain.gateways.crestron_gateway import ICrestronGateway
from crestron_home.domain.services.value_translation import (
    MAX_LEVEL,
    celsius_to_deci_fahrenheit,
    fan_mode_to_wire,
    lock_action_for,
    security_state_to_wire,
    thermostat_mode_to_wire,
)
from crestron_home.shared import get_logger

logger = get_logger(__name__)

WireRequest = Tuple[str, Optional[Any]]


def _check_level(name: str, value: int) -> int:
    if not 0 <= value <= MAX_LEVEL:
        raise CommandError(
            f"{name} must be between 0 and {MAX_LEVEL}, got {value}",
            details={name: value},
        )
    return value


def build_wire_request(intent: CommandIntent) -> WireRequest:
    """
    Return the endpoint path and JSON body for a command intent.

    Raises:
        CommandError: If the intent or its target cannot be sent
    """
    device_id = intent.device_id

    if isinstance(intent, SetLightLevel):
        level = _check_level("level", intent.level)
        return "/Lights/SetState", {
            "lights": [{"id": device_id, "level": level, "time": intent.time}]
        }
    if isinstance(intent, SetShadePosition):
        position = _check_level("position", intent.position)
        return "/Shades/SetState", {"shades": [{"id": device_id, "position": position}]}
    if isinstance(intent, RecallScene):
        return f"/SCENES/RECALL/{device_id}", None
    if isinstance(intent, SetTemperature):
        return "/thermostats/SetPoint", {
            "id": device_id,
            "setpoints": [
                {
                    "type": intent.kind.value,
                    "temperature": celsius_to_deci_fahrenheit(intent.celsius),
                }
            ],
        }
    if isinstance(intent, SetMode):
        return "/thermostats/mode", {
            "thermostats": [{"id": device_id, "mode": thermostat_mode_to_wire(intent.mode)}]
        }
    if isinstance(intent, SetFanMode):
        return "/thermostats/fanmode", {
            "thermostats": [
                {"id": device_id, "mode": fan_mode_to_wire(intent.fan_mode)}
            ]
        }
    if isinstance(intent, SetLockState):
        return f"/doorlocks/{lock_action_for(intent.target)}/{device_id}", None
    if isinstance(intent, SetSecurityState):
        return f"/securitydevices/{device_id}", {
            "state": security_state_to_wire(intent.target)
        }

    raise CommandError(
        f"Unsupported command {type(intent).__name__}",
        details={"device_id": device_id},
    )


class ApplyCommandUseCase:
    """Use case sending a single command to the controller."""

    @inject
    def __init__(
        self,
        crestron_gateway: ICrestronGateway = Provide["crestron_gateway"],
    ):
        self.crestron_gateway = crestron_gateway

    async def execute(self, intent: CommandIntent) -> CommandResult:
        """
        Send a command.

        Args:
            intent: Command in canonical units

        Returns:
            CommandResult: Successful result with the controller response

        Raises:
            CommandError: If the command cannot be translated or the write fails
        """
        path, payload = build_wire_request(intent)
        command = type(intent).__name__

        logger.info(
            "command.dispatch", command=command, device_id=intent.device_id, path=path
        )

        try:
            response = await self.crestron_gateway.post(path, payload)
        except (TransportError, AuthError) as e:
            logger.error(
                "command.failed",
                command=command,
                device_id=intent.device_id,
                path=path,
                error=e.message,
            )
            raise CommandError(
                f"{command} for device {intent.device_id} failed: {e.message}",
                details={"path": path, **e.details},
            ) from e

        logger.debug("command.succeeded", command=command, device_id=intent.device_id)
        return CommandResult(intent=intent, ok=True, response=response)
