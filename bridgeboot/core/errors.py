"""Domain-specific errors for bridgeboot."""


class BridgebootError(Exception):
    """Base error for bridgeboot."""


class ConfigurationError(BridgebootError):
    """Raised when a configuration value is invalid."""


class FamilyLoadError(ConfigurationError):
    """Raised when reading device-family files fails."""


class FamilyValidationError(ConfigurationError):
    """Raised when a device-family file does not conform to schema or semantics."""


class PortEnumerationError(BridgebootError):
    """Raised when the host serial port list cannot be read."""


class PortResolutionError(BridgebootError):
    """Raised when ports were listed but no single target port was found."""


class NoPortsError(PortResolutionError):
    """Raised when no USB serial ports are visible at all."""


class NoMatchingPortError(PortResolutionError):
    """Raised when USB ports are visible but none belongs to the device."""


class AmbiguousPortError(PortResolutionError):
    """Raised when more than one port matches the device."""


class DeviceMetadataError(PortResolutionError):
    """Raised when the device lacks the identity field the matcher needs."""


class TransitionError(BridgebootError):
    """Base error for bootloader transition failures."""


class UnsupportedDeviceError(TransitionError):
    """Raised when a device family has no bootloader transition."""


class BootloaderProtocolError(TransitionError):
    """Raised when the device rejects or ignores the enter-bootloader command."""


class TransportError(TransitionError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised on serial port open failures."""


class TransportSendError(TransportError):
    """Raised when writing to an open port fails."""


class SelectionError(BridgebootError):
    """Raised when no firmware file was chosen."""
