"""Named configuration values and config file locations."""

from __future__ import annotations

import os
from pathlib import Path

# Normal command-protocol speed for Bridge devices.
DEFAULT_BAUD_RATE = 9600

# Opening an RP2040 CDC port at this rate resets it into its bootloader.
BOOTLOADER_RESET_BAUD_RATE = 1200

DEFAULT_COMMAND_TIMEOUT_S = 2.0


def config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "bridgeboot"


def family_dir() -> Path:
    return config_dir() / "families"
