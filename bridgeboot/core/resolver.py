"""Resolve a connected device to the one serial port it is attached to."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from serial.tools import list_ports

from bridgeboot.core.errors import (
    AmbiguousPortError,
    NoMatchingPortError,
    NoPortsError,
    PortEnumerationError,
)
from bridgeboot.core.model import CandidatePort, ConnectedDevice, PortDescriptor
from bridgeboot.core.port_match import PortMatcher, select_match_strategy

LOGGER = logging.getLogger(__name__)


class PortResolver:
    """Enumerate host serial ports and bind a device to exactly one of them.

    Resolution is read-only: ports are listed and compared, never opened.
    """

    def __init__(
        self,
        *,
        list_ports_fn: Callable[[], Iterable[Any]] | None = None,
        matcher: PortMatcher | None = None,
    ) -> None:
        self._list_ports = list_ports_fn or list_ports.comports
        self.matcher = matcher or select_match_strategy()

    def list_candidates(self) -> list[CandidatePort]:
        try:
            infos = list(self._list_ports())
        except Exception as exc:
            raise PortEnumerationError(f"Unable to list serial ports: {exc}") from exc

        candidates: list[CandidatePort] = []
        for info in infos:
            LOGGER.debug("reviewing port: %r", info)
            candidates.append(CandidatePort.from_port_info(info))
        return candidates

    def resolve(self, device: ConnectedDevice, baud_rate: int) -> PortDescriptor:
        if isinstance(baud_rate, bool) or not isinstance(baud_rate, int) or baud_rate <= 0:
            raise ValueError(f"baud_rate must be a positive integer, got {baud_rate!r}")

        usb_ports = [port for port in self.list_candidates() if port.is_usb]
        if not usb_ports:
            raise NoPortsError("No serial ports available")

        matches = self.matcher(device, usb_ports)
        if not matches:
            raise NoMatchingPortError(f"Unable to locate device {device.label()}")
        if len(matches) > 1:
            names = ", ".join(port.port_name for port in matches)
            raise AmbiguousPortError(
                f"Multiple ports match device {device.label()}: {names}. Disconnect the other units and retry."
            )

        port = matches[0]
        LOGGER.debug("found device! port: %s with baud rate: %s", port.port_name, baud_rate)
        return PortDescriptor(port_name=port.port_name, baud_rate=baud_rate)
