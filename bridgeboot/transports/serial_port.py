"""Serial port opener backed by pyserial."""

from __future__ import annotations

import serial

from bridgeboot.core.config import DEFAULT_COMMAND_TIMEOUT_S
from bridgeboot.core.model import PortDescriptor


def open_serial_port(descriptor: PortDescriptor, *, timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S) -> serial.Serial:
    """Open ``descriptor`` and return the live handle.

    Raises ``serial.SerialException`` (an ``OSError``) when the host refuses
    the open; callers decide how to classify it.
    """
    return serial.Serial(
        port=descriptor.port_name,
        baudrate=descriptor.baud_rate,
        timeout=timeout_s,
        write_timeout=timeout_s,
    )
