"""Port-to-device matching policies.

USB metadata reliability differs per host: Windows reports a usable product
string but not always the serial number, while Linux and macOS expose the
serial number reliably. Each policy is a plain function taking the device and
the USB-backed candidate ports and returning every port that matches.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence

from bridgeboot.core.errors import ConfigurationError, DeviceMetadataError
from bridgeboot.core.model import CandidatePort, ConnectedDevice

LOGGER = logging.getLogger(__name__)

PortMatcher = Callable[[ConnectedDevice, Sequence[CandidatePort]], list[CandidatePort]]


def match_product_prefix(device: ConnectedDevice, ports: Sequence[CandidatePort]) -> list[CandidatePort]:
    if not device.description:
        raise DeviceMetadataError("Unable to retrieve device descriptions")

    matches: list[CandidatePort] = []
    for port in ports:
        LOGGER.debug("description: %r, product: %r", device.description, port.product)
        if port.product is None:
            continue
        if port.product.startswith(device.description):
            matches.append(port)
    return matches


def match_serial_number(device: ConnectedDevice, ports: Sequence[CandidatePort]) -> list[CandidatePort]:
    if not device.serial_number:
        raise DeviceMetadataError("Unable to retrieve device serial number")

    matches: list[CandidatePort] = []
    for port in ports:
        LOGGER.debug("serial: %r, port serial: %r", device.serial_number, port.serial_number)
        if port.serial_number == device.serial_number:
            matches.append(port)
    return matches


MATCHERS: dict[str, PortMatcher] = {
    "product": match_product_prefix,
    "serial": match_serial_number,
}


def select_match_strategy(name: str | None = None, *, platform: str | None = None) -> PortMatcher:
    """Return the matcher named ``name``, or the host default when omitted."""
    if name is not None:
        matcher = MATCHERS.get(name)
        if matcher is None:
            available = ", ".join(sorted(MATCHERS))
            raise ConfigurationError(f"Unknown match strategy '{name}'. Available: {available}")
        return matcher

    host = platform if platform is not None else sys.platform
    if host.startswith("win"):
        return match_product_prefix
    return match_serial_number
