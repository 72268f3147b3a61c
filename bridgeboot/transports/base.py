"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol

from bridgeboot.core.model import PortDescriptor


class SerialPort(Protocol):
    def write(self, data: bytes) -> int | None:
        """Write raw bytes to the port."""

    def flush(self) -> None:
        """Block until written data is transmitted."""

    def read_until(self, expected: bytes = b"\n", size: int | None = None) -> bytes:
        """Read until ``expected`` is seen or the read timeout expires."""

    def close(self) -> None:
        """Release the port handle."""


class PortOpener(Protocol):
    def __call__(self, descriptor: PortDescriptor, *, timeout_s: float) -> SerialPort:
        """Open the port described by ``descriptor``."""
