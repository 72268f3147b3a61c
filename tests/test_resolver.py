from __future__ import annotations

from types import SimpleNamespace

import pytest

from bridgeboot.core.errors import (
    AmbiguousPortError,
    DeviceMetadataError,
    NoMatchingPortError,
    NoPortsError,
    PortEnumerationError,
    PortResolutionError,
    TransportError,
)
from bridgeboot.core.model import ConnectedDevice, DeviceType, PortDescriptor
from bridgeboot.core.port_match import match_product_prefix, match_serial_number
from bridgeboot.core.resolver import PortResolver


def _info(device: str, *, vid: int | None = 0x0483, product: str | None = None, serial: str | None = None):
    return SimpleNamespace(device=device, vid=vid, product=product, serial_number=serial)


def _resolver(infos, matcher=match_serial_number) -> PortResolver:
    return PortResolver(list_ports_fn=lambda: infos, matcher=matcher)


def test_serial_strategy_resolves_matching_port() -> None:
    resolver = _resolver([_info("/dev/ttyACM0", serial="AA11"), _info("/dev/ttyACM1", serial="BB22")])

    descriptor = resolver.resolve(ConnectedDevice(serial_number="BB22"), 9600)
    assert descriptor == PortDescriptor(port_name="/dev/ttyACM1", baud_rate=9600)


def test_serial_strategy_no_match() -> None:
    resolver = _resolver([_info("/dev/ttyACM0", serial="AA11"), _info("/dev/ttyACM1", serial="BB22")])

    with pytest.raises(NoMatchingPortError):
        resolver.resolve(ConnectedDevice(serial_number="CC33"), 9600)


def test_product_strategy_resolves_prefix_match() -> None:
    resolver = _resolver(
        [_info("COM3", product="Bridge6-Foo"), _info("COM4", product="Other-Device")],
        matcher=match_product_prefix,
    )

    descriptor = resolver.resolve(ConnectedDevice(description="Bridge6"), 1200)
    assert descriptor.port_name == "COM3"
    assert descriptor.baud_rate == 1200


@pytest.mark.parametrize("matcher", [match_product_prefix, match_serial_number])
def test_zero_ports_is_resolution_failure(matcher) -> None:
    resolver = _resolver([], matcher=matcher)

    with pytest.raises(NoPortsError) as exc:
        resolver.resolve(ConnectedDevice(serial_number="AA11", description="Bridge6"), 9600)
    assert isinstance(exc.value, PortResolutionError)
    assert not isinstance(exc.value, TransportError)


def test_non_usb_ports_are_ignored() -> None:
    resolver = _resolver([_info("/dev/ttyS0", vid=None, serial="AA11")])

    with pytest.raises(NoPortsError):
        resolver.resolve(ConnectedDevice(serial_number="AA11"), 9600)


@pytest.mark.parametrize("matcher", [match_product_prefix, match_serial_number])
def test_missing_identity_is_metadata_error(matcher) -> None:
    resolver = _resolver(
        [_info("COM3", product="Bridge6", serial="AA11")],
        matcher=matcher,
    )

    with pytest.raises(DeviceMetadataError):
        resolver.resolve(ConnectedDevice(device_type=DeviceType.BRIDGE6), 9600)


def test_multiple_matches_are_ambiguous() -> None:
    resolver = _resolver(
        [_info("COM3", product="Bridge6"), _info("COM5", product="Bridge6 MIDI")],
        matcher=match_product_prefix,
    )

    with pytest.raises(AmbiguousPortError) as exc:
        resolver.resolve(ConnectedDevice(description="Bridge6"), 9600)
    assert "COM3" in str(exc.value)
    assert "COM5" in str(exc.value)


def test_enumeration_failure_is_wrapped() -> None:
    def broken():
        raise OSError("udev unavailable")

    resolver = PortResolver(list_ports_fn=broken, matcher=match_serial_number)
    with pytest.raises(PortEnumerationError):
        resolver.resolve(ConnectedDevice(serial_number="AA11"), 9600)


@pytest.mark.parametrize("baud_rate", [0, -1200, True])
def test_baud_rate_must_be_positive_int(baud_rate) -> None:
    resolver = _resolver([_info("COM3", serial="AA11")])
    with pytest.raises(ValueError):
        resolver.resolve(ConnectedDevice(serial_number="AA11"), baud_rate)


def test_list_candidates_marks_usb_ports() -> None:
    resolver = _resolver([_info("/dev/ttyS0", vid=None), _info("/dev/ttyACM0", product="Click", serial="AA11")])

    candidates = resolver.list_candidates()
    assert [(c.port_name, c.is_usb) for c in candidates] == [("/dev/ttyS0", False), ("/dev/ttyACM0", True)]
    assert candidates[1].product == "Click"
