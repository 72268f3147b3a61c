"""Drive a connected device from normal mode into its bootloader."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

import serial

from bridgeboot.core.config import BOOTLOADER_RESET_BAUD_RATE, DEFAULT_BAUD_RATE, DEFAULT_COMMAND_TIMEOUT_S
from bridgeboot.core.errors import BootloaderProtocolError, BridgebootError, TransportConnectError, UnsupportedDeviceError
from bridgeboot.core.families import FamilyTable, load_families
from bridgeboot.core.model import ConnectedDevice, PortDescriptor, TransitionResult, TransitionStrategy
from bridgeboot.core.resolver import PortResolver
from bridgeboot.transports.base import PortOpener, SerialPort
from bridgeboot.transports.command import CommandChannel, ControlArg
from bridgeboot.transports.serial_port import open_serial_port

LOGGER = logging.getLogger(__name__)

# Windows ERROR_GEN_FAILURE: "A device attached to the system is not functioning."
ERROR_GEN_FAILURE = 31

# pyserial's win32 backend folds ctypes.WinError() into the SerialException text,
# e.g. "could not open port 'COM5': OSError(22, '...', None, 31)".
_WINERROR_REPR_RE = re.compile(r"\w*Error\(\d+, '[^']*', None, (\d+)\)")


def is_benign_disconnect_artifact(exc: BaseException) -> bool:
    """Return True for the open failure Windows reports when a 1200 baud reset succeeds.

    The RP2040 drops off the bus while the host is still configuring the port,
    and Windows surfaces that as ERROR_GEN_FAILURE. No other error qualifies.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, OSError) and getattr(current, "winerror", None) == ERROR_GEN_FAILURE:
            return True
        match = _WINERROR_REPR_RE.search(str(current))
        if match and int(match.group(1)) == ERROR_GEN_FAILURE:
            return True
        current = current.__cause__ or current.__context__
    return False


class BootloaderEngine:
    """Run the bootloader transition implied by a device's family.

    Each call resolves the port, performs one transition attempt, and releases
    the port before returning. Nothing is retried.
    """

    def __init__(
        self,
        *,
        resolver: PortResolver | None = None,
        families: FamilyTable | None = None,
        opener: PortOpener = open_serial_port,
        channel_factory: Callable[[SerialPort], CommandChannel] = CommandChannel,
        timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S,
    ) -> None:
        self.resolver = resolver or PortResolver()
        self.families = families or load_families()
        self._opener = opener
        self._channel_factory = channel_factory
        self._timeout_s = timeout_s
        self._handlers: dict[TransitionStrategy, Callable[[ConnectedDevice], PortDescriptor]] = {
            TransitionStrategy.COMMAND: self._enter_via_command,
            TransitionStrategy.BAUD_RESET: self._enter_via_baud_reset,
        }

    def strategy_for(self, device: ConnectedDevice) -> TransitionStrategy:
        return self.families.lookup(device.device_type).strategy

    def transition(self, device: ConnectedDevice) -> TransitionResult:
        strategy = self.strategy_for(device)
        handler = self._handlers.get(strategy)
        if handler is None:
            raise UnsupportedDeviceError(f"Device {device.label()} has no bootloader transition")

        LOGGER.debug("%s: resolving port for %s transition", device.label(), strategy.value)
        try:
            port = handler(device)
        except BridgebootError as exc:
            LOGGER.debug("%s: transition failed: %s", device.label(), exc)
            raise

        LOGGER.info("%s entered bootloader via %s on %s", device.label(), strategy.value, port.port_name)
        return TransitionResult(device=device, strategy=strategy, port=port)

    def _open(self, descriptor: PortDescriptor) -> SerialPort:
        LOGGER.debug("opening port: %s with baud rate: %s", descriptor.port_name, descriptor.baud_rate)
        return self._opener(descriptor, timeout_s=self._timeout_s)

    def _enter_via_command(self, device: ConnectedDevice) -> PortDescriptor:
        descriptor = self.resolver.resolve(device, DEFAULT_BAUD_RATE)
        try:
            port = self._open(descriptor)
        except (serial.SerialException, OSError) as exc:
            raise TransportConnectError(f"Unable to open serial port {descriptor.port_name}: {exc}") from exc

        try:
            self._channel_factory(port).send_control(ControlArg.ENTER_BOOTLOADER)
        except BootloaderProtocolError as exc:
            raise BootloaderProtocolError(f"Unable to enter bootloader due to error: {exc}") from exc
        finally:
            port.close()
        return descriptor

    def _enter_via_baud_reset(self, device: ConnectedDevice) -> PortDescriptor:
        # Opening at this rate is the trigger; the device re-enumerates right after.
        descriptor = self.resolver.resolve(device, BOOTLOADER_RESET_BAUD_RATE)
        try:
            port = self._open(descriptor)
        except (serial.SerialException, OSError) as exc:
            if is_benign_disconnect_artifact(exc):
                LOGGER.warning("Ignoring disconnect error from %s after reset trigger: %s", descriptor.port_name, exc)
                return descriptor
            raise TransportConnectError(f"Unable to open RP serial port {descriptor.port_name}: {exc}") from exc

        port.close()
        return descriptor
