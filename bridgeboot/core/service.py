"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging
from pathlib import Path

from bridgeboot.core.bootloader import BootloaderEngine
from bridgeboot.core.errors import ConfigurationError, SelectionError
from bridgeboot.core.families import FamilyTable, load_families
from bridgeboot.core.model import (
    CandidatePort,
    ConnectedDevice,
    DeviceFamily,
    InstallResult,
    RemoteAsset,
    SelectionKind,
    TransitionResult,
)
from bridgeboot.core.resolver import PortResolver
from bridgeboot.core.selection import FileSelector, PromptFileSelector

LOGGER = logging.getLogger(__name__)


class InstallService:
    """Orchestrate firmware installs.

    Pass either a ready ``engine`` or the ``resolver``/``families`` to build
    one from, not both.
    """

    def __init__(
        self,
        *,
        engine: BootloaderEngine | None = None,
        selector: FileSelector | None = None,
        resolver: PortResolver | None = None,
        families: FamilyTable | None = None,
    ) -> None:
        if engine is not None and (resolver is not None or families is not None):
            raise ConfigurationError("Pass resolver/families or a prebuilt engine, not both")
        if engine is None:
            engine = BootloaderEngine(resolver=resolver, families=families or load_families())
        self.engine = engine
        self.families = engine.families
        self.load_warnings = engine.families.warnings
        self.selector = selector or PromptFileSelector()

    def list_ports(self) -> list[CandidatePort]:
        return self.engine.resolver.list_candidates()

    def list_families(self) -> list[DeviceFamily]:
        return sorted(self.families.families.values(), key=lambda f: f.device_type.value)

    def transition_to_bootloader(self, device: ConnectedDevice) -> TransitionResult:
        return self.engine.transition(device)

    def install_from_local_file(self, device: ConnectedDevice) -> InstallResult:
        firmware_path = self._select_local_file(device)
        transition = self.transition_to_bootloader(device)
        LOGGER.info("%s ready for upload of %s", device.label(), firmware_path)
        return InstallResult(device=device, transition=transition, firmware_path=firmware_path)

    def install_from_remote_asset(self, device: ConnectedDevice, asset: RemoteAsset) -> InstallResult:
        # TODO: download the asset and run the transition once remote installs have a wire protocol.
        LOGGER.info("Remote install of '%s' for %s is not implemented; nothing to do", asset.name, device.label())
        return InstallResult(device=device, asset=asset)

    def _select_local_file(self, device: ConnectedDevice) -> Path:
        extension = self.families.lookup(device.device_type).firmware_extension
        try:
            response = self.selector.select(extension)
        except (SelectionError, OSError) as exc:
            LOGGER.info("local file selection cancelled: %s", exc)
            raise SelectionError("Unable to find local file") from exc

        if response.kind is not SelectionKind.SELECTED or len(response.paths) != 1:
            LOGGER.debug("local file selection cancelled (%s)", response.kind.value)
            raise SelectionError("Unable to find local file")

        path = response.paths[0]
        if not path.is_file():
            raise SelectionError(f"Unable to find local file {path}")
        if extension and path.suffix.lower() != f".{extension}":
            raise SelectionError(f"Expected a .{extension} firmware file for {device.label()}, got {path.name}")
        return path
