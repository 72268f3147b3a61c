"""Bridge device command protocol over an open serial port.

Frames are ASCII ``"{transaction_id},{body}~"``. A control command is sent in
two frames: the ``CTRL`` command word, then the control argument. The device
acknowledges each frame with ``"{transaction_id},ok~"``.
"""

from __future__ import annotations

import logging
from enum import Enum

import serial

from bridgeboot.core.errors import BootloaderProtocolError, TransportSendError
from bridgeboot.transports.base import SerialPort

LOGGER = logging.getLogger(__name__)

TERMINATOR = b"~"
ACK = "ok"
CONTROL_COMMAND = "CTRL"


class ControlArg(str, Enum):
    ENTER_BOOTLOADER = "enterBootloader"


class CommandChannel:
    def __init__(self, port: SerialPort, *, transaction_id: int = 0) -> None:
        self._port = port
        self.transaction_id = transaction_id

    def send_control(self, arg: ControlArg) -> None:
        """Send a control command and wait for both acknowledgements."""
        self._expect_ack(self._exchange(CONTROL_COMMAND), CONTROL_COMMAND)
        self._expect_ack(self._exchange(arg.value), arg.value)

    def _exchange(self, body: str) -> str:
        frame = f"{self.transaction_id},{body}".encode("ascii") + TERMINATOR
        LOGGER.debug("sending frame: %r", frame)
        try:
            self._port.write(frame)
            self._port.flush()
        except (serial.SerialException, OSError) as exc:
            raise TransportSendError(f"Command write failed: {exc}") from exc

        try:
            raw = self._port.read_until(TERMINATOR)
        except (serial.SerialException, OSError) as exc:
            raise TransportSendError(f"Command read failed: {exc}") from exc
        LOGGER.debug("received frame: %r", raw)

        if not raw.endswith(TERMINATOR):
            raise BootloaderProtocolError(f"No response to '{body}' before timeout")

        text = raw[: -len(TERMINATOR)].decode("ascii", errors="replace").strip()
        _, sep, reply = text.partition(",")
        return reply.strip() if sep else text

    @staticmethod
    def _expect_ack(reply: str, body: str) -> None:
        if reply.lower() != ACK:
            raise BootloaderProtocolError(f"Device rejected '{body}': {reply or '<empty>'}")
