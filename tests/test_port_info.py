from __future__ import annotations

from serial.tools.list_ports_common import ListPortInfo

from bridgeboot.core.model import CandidatePort, ConnectedDevice, DeviceType, PortDescriptor
from bridgeboot.core.port_match import match_product_prefix, match_serial_number
from bridgeboot.core.resolver import PortResolver


def _windows_port(device: str, friendly: str, *, vid: int | None = 0x0483, serial: str | None = None) -> ListPortInfo:
    # Shaped like serial.tools.list_ports_windows: description and ids set, product left unset.
    info = ListPortInfo(device, skip_link_detection=True)
    info.description = friendly
    info.manufacturer = "Microsoft" if vid is not None else "(Standard port types)"
    info.vid = vid
    info.pid = 0x5740 if vid is not None else None
    info.serial_number = serial
    return info


def _linux_port(device: str, *, product: str | None, serial: str | None, vid: int | None = 0x2E8A) -> ListPortInfo:
    # Shaped like serial.tools.list_ports_linux for a USB CDC device.
    info = ListPortInfo(device, skip_link_detection=True)
    info.vid = vid
    info.pid = 0x000A if vid is not None else None
    info.product = product
    info.serial_number = serial
    info.description = product or "n/a"
    return info


def test_windows_friendly_name_becomes_product() -> None:
    port = CandidatePort.from_port_info(_windows_port("COM5", "Bridge6 (COM5)", serial="AA11"))

    assert port == CandidatePort(port_name="COM5", is_usb=True, product="Bridge6", serial_number="AA11")


def test_windows_product_prefix_resolves_real_port_info() -> None:
    infos = [
        _windows_port("COM1", "Communications Port (COM1)", vid=None),
        _windows_port("COM5", "Bridge6 (COM5)", serial="AA11"),
        _windows_port("COM6", "USB Serial Device (COM6)", serial="BB22"),
    ]
    resolver = PortResolver(list_ports_fn=lambda: infos, matcher=match_product_prefix)

    descriptor = resolver.resolve(ConnectedDevice(device_type=DeviceType.BRIDGE6, description="Bridge6"), 9600)
    assert descriptor == PortDescriptor(port_name="COM5", baud_rate=9600)


def test_linux_port_info_keeps_reported_product() -> None:
    port = CandidatePort.from_port_info(_linux_port("/dev/ttyACM0", product="Click", serial="E661"))

    assert port.is_usb
    assert port.product == "Click"
    assert port.serial_number == "E661"


def test_linux_serial_match_resolves_real_port_info() -> None:
    infos = [
        _linux_port("/dev/ttyS0", product=None, serial=None, vid=None),
        _linux_port("/dev/ttyACM0", product="Click", serial="E661"),
        _linux_port("/dev/ttyACM1", product="ULoop", serial="E662"),
    ]
    resolver = PortResolver(list_ports_fn=lambda: infos, matcher=match_serial_number)

    descriptor = resolver.resolve(ConnectedDevice(device_type=DeviceType.ULOOP, serial_number="E662"), 1200)
    assert descriptor == PortDescriptor(port_name="/dev/ttyACM1", baud_rate=1200)


def test_non_usb_port_info_is_not_usb_and_has_no_product() -> None:
    legacy = CandidatePort.from_port_info(_windows_port("COM1", "Communications Port (COM1)", vid=None))

    assert not legacy.is_usb
    assert legacy.product is None

    resolver = PortResolver(list_ports_fn=lambda: [_linux_port("/dev/ttyS0", product=None, serial=None, vid=None)])
    assert [p.is_usb for p in resolver.list_candidates()] == [False]


def test_usb_port_without_description_has_no_product() -> None:
    info = ListPortInfo("COM9", skip_link_detection=True)
    info.vid = 0x0483

    assert CandidatePort.from_port_info(info).product is None
