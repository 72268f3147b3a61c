"""Stable public API for building tooling on top of bridgeboot.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from bridgeboot.core.bootloader import BootloaderEngine, is_benign_disconnect_artifact
from bridgeboot.core.config import BOOTLOADER_RESET_BAUD_RATE, DEFAULT_BAUD_RATE
from bridgeboot.core.errors import (
    AmbiguousPortError,
    BootloaderProtocolError,
    BridgebootError,
    ConfigurationError,
    DeviceMetadataError,
    FamilyLoadError,
    FamilyValidationError,
    NoMatchingPortError,
    NoPortsError,
    PortEnumerationError,
    PortResolutionError,
    SelectionError,
    TransitionError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    UnsupportedDeviceError,
)
from bridgeboot.core.model import (
    CandidatePort,
    ConnectedDevice,
    DeviceFamily,
    DeviceType,
    InstallResult,
    PortDescriptor,
    RemoteAsset,
    TransitionResult,
    TransitionStrategy,
)
from bridgeboot.core.resolver import PortResolver
from bridgeboot.core.selection import FileSelector, StaticFileSelector
from bridgeboot.core.service import InstallService

__all__ = [
    "BOOTLOADER_RESET_BAUD_RATE",
    "DEFAULT_BAUD_RATE",
    "AmbiguousPortError",
    "BootloaderProtocolError",
    "BridgebootError",
    "ConfigurationError",
    "DeviceMetadataError",
    "FamilyLoadError",
    "FamilyValidationError",
    "NoMatchingPortError",
    "NoPortsError",
    "PortEnumerationError",
    "PortResolutionError",
    "SelectionError",
    "TransitionError",
    "TransportConnectError",
    "TransportError",
    "TransportSendError",
    "UnsupportedDeviceError",
    "CandidatePort",
    "ConnectedDevice",
    "DeviceFamily",
    "DeviceType",
    "InstallResult",
    "PortDescriptor",
    "RemoteAsset",
    "TransitionResult",
    "TransitionStrategy",
    "BootloaderEngine",
    "PortResolver",
    "FileSelector",
    "StaticFileSelector",
    "is_benign_disconnect_artifact",
    "Client",
]


class Client:
    """Public client for bootloader transitions and firmware install hand-off.

    A `Client` wraps family loading, port resolution, and the bootloader
    transition behind a stable API intended for third-party tools
    (GUI/TUI/services/scripts). Calls are synchronous and block until the
    transition finishes or fails.
    """

    def __init__(
        self,
        *,
        engine: BootloaderEngine | None = None,
        selector: FileSelector | None = None,
    ) -> None:
        self._service = InstallService(engine=engine, selector=selector)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_ports(self) -> list[CandidatePort]:
        return self._service.list_ports()

    def list_families(self) -> list[DeviceFamily]:
        return self._service.list_families()

    def transition_to_bootloader(self, device: ConnectedDevice) -> TransitionResult:
        return self._service.transition_to_bootloader(device)

    def install_from_local_file(self, device: ConnectedDevice) -> InstallResult:
        return self._service.install_from_local_file(device)

    def install_from_remote_asset(self, device: ConnectedDevice, asset: RemoteAsset) -> InstallResult:
        return self._service.install_from_remote_asset(device, asset)
