"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from bridgeboot.core.bootloader import BootloaderEngine
from bridgeboot.core.errors import BridgebootError
from bridgeboot.core.families import load_families
from bridgeboot.core.model import ConnectedDevice, DeviceType
from bridgeboot.core.port_match import select_match_strategy
from bridgeboot.core.resolver import PortResolver
from bridgeboot.core.selection import PromptFileSelector, StaticFileSelector
from bridgeboot.core.service import InstallService

app = typer.Typer(help="Find a connected device's serial port and switch it into bootloader mode")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service(match: str | None = None, firmware: Path | None = None) -> InstallService:
    resolver = PortResolver(matcher=select_match_strategy(match))
    engine = BootloaderEngine(resolver=resolver, families=load_families())
    selector = StaticFileSelector([firmware]) if firmware is not None else PromptFileSelector()
    service = InstallService(engine=engine, selector=selector)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _device(device_type: DeviceType, description: str | None, serial: str | None) -> ConnectedDevice:
    return ConnectedDevice(device_type=device_type, description=description, serial_number=serial)


@app.command("ports")
def list_ports() -> None:
    """List visible serial ports and their USB identity."""
    try:
        service = _build_service()
        ports = service.list_ports()
        if not ports:
            typer.echo("No serial ports found")
            return

        for port in ports:
            if not port.is_usb:
                typer.echo(f"{port.port_name} (not USB)")
                continue
            typer.echo(
                f"{port.port_name} product={port.product or '-'} serial={port.serial_number or '-'}"
            )
    except BridgebootError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("families")
def list_families() -> None:
    """List device families and their bootloader transition."""
    try:
        service = _build_service()
        for family in service.list_families():
            extension = f" (*.{family.firmware_extension})" if family.firmware_extension else ""
            typer.echo(f"{family.device_type.value}: {family.strategy.value}{extension}")
    except BridgebootError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("bootloader")
def enter_bootloader(
    device_type: DeviceType = typer.Option(..., "--type", help="Device family"),
    description: str | None = typer.Option(None, "--description", help="USB product string prefix"),
    serial: str | None = typer.Option(None, "--serial", help="USB serial number"),
    match: str | None = typer.Option(None, "--match", help="Port match strategy: product or serial"),
) -> None:
    """Switch a connected device into bootloader mode."""
    try:
        service = _build_service(match)
        result = service.transition_to_bootloader(_device(device_type, description, serial))
        typer.echo(
            f"{result.device.label()} entered bootloader via {result.strategy.value} on {result.port.port_name}"
        )
    except BridgebootError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("install")
def install(
    device_type: DeviceType = typer.Option(..., "--type", help="Device family"),
    description: str | None = typer.Option(None, "--description", help="USB product string prefix"),
    serial: str | None = typer.Option(None, "--serial", help="USB serial number"),
    match: str | None = typer.Option(None, "--match", help="Port match strategy: product or serial"),
    firmware: Path | None = typer.Option(None, "--file", help="Firmware image; prompts when omitted"),
) -> None:
    """Pick a local firmware file and switch the device into bootloader mode for upload."""
    try:
        service = _build_service(match, firmware)
        result = service.install_from_local_file(_device(device_type, description, serial))
        port = result.transition.port.port_name if result.transition else "-"
        typer.echo(f"Ready to upload {result.firmware_path} to {result.device.label()} (was {port})")
    except BridgebootError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
