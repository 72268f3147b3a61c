"""Core data models used across resolver, engine, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class DeviceType(str, Enum):
    BRIDGE6 = "Bridge6"
    BRIDGE4 = "Bridge4"
    CLICK = "Click"
    ULOOP = "ULoop"
    UNKNOWN = "Unknown"


class TransitionStrategy(str, Enum):
    COMMAND = "command"
    BAUD_RESET = "baud_reset"
    NONE = "none"


class SelectionKind(str, Enum):
    SELECTED = "selected"
    MULTIPLE = "multiple"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ConnectedDevice:
    device_type: DeviceType | None = None
    description: str | None = None
    serial_number: str | None = None

    def label(self) -> str:
        kind = self.device_type.value if self.device_type else "<unknown-type>"
        ident = self.description or self.serial_number or "<no-identity>"
        return f"{kind} ({ident})"


@dataclass(frozen=True)
class CandidatePort:
    port_name: str
    is_usb: bool
    product: str | None = None
    serial_number: str | None = None

    @classmethod
    def from_port_info(cls, info: Any) -> CandidatePort:
        """Build from a pyserial ``ListPortInfo`` (or anything shaped like one).

        pyserial's Windows backend never sets ``product``; the USB product
        string only shows up in the friendly name, e.g. ``"Bridge6 (COM5)"``.
        """
        is_usb = getattr(info, "vid", None) is not None
        product = getattr(info, "product", None)
        if product is None and is_usb:
            product = _product_from_description(getattr(info, "description", None), info.device)
        return cls(
            port_name=info.device,
            is_usb=is_usb,
            product=product,
            serial_number=getattr(info, "serial_number", None),
        )


def _product_from_description(description: str | None, port_name: str) -> str | None:
    if not description or description == "n/a":
        return None
    suffix = f" ({port_name})"
    if description.endswith(suffix):
        description = description[: -len(suffix)]
    return description.strip() or None


@dataclass(frozen=True)
class PortDescriptor:
    port_name: str
    baud_rate: int


@dataclass(frozen=True)
class DeviceFamily:
    device_type: DeviceType
    strategy: TransitionStrategy
    firmware_extension: str | None = None


@dataclass(frozen=True)
class RemoteAsset:
    name: str
    url: str
    size: int | None = None


@dataclass(frozen=True)
class SelectionResponse:
    kind: SelectionKind
    paths: tuple[Path, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TransitionResult:
    device: ConnectedDevice
    strategy: TransitionStrategy
    port: PortDescriptor


@dataclass(frozen=True)
class InstallResult:
    device: ConnectedDevice
    transition: TransitionResult | None = None
    firmware_path: Path | None = None
    asset: RemoteAsset | None = None
