"""Firmware file selection collaborators."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import typer

from bridgeboot.core.model import SelectionKind, SelectionResponse


class FileSelector(Protocol):
    def select(self, extension: str | None) -> SelectionResponse:
        """Ask for a firmware file, optionally filtered by extension."""


class StaticFileSelector:
    """Selector answering with paths chosen ahead of time (e.g. ``--file``)."""

    def __init__(self, paths: Sequence[str | Path]) -> None:
        self.paths = tuple(Path(p) for p in paths)

    def select(self, extension: str | None) -> SelectionResponse:
        if not self.paths:
            return SelectionResponse(kind=SelectionKind.CANCELLED)
        if len(self.paths) > 1:
            return SelectionResponse(kind=SelectionKind.MULTIPLE, paths=self.paths)
        return SelectionResponse(kind=SelectionKind.SELECTED, paths=self.paths)


class PromptFileSelector:
    """Interactive selector asking for a path on the terminal."""

    def select(self, extension: str | None) -> SelectionResponse:
        hint = f" (*.{extension})" if extension else ""
        try:
            answer = typer.prompt(f"Firmware file{hint}", default="", show_default=False)
        except typer.Abort:
            return SelectionResponse(kind=SelectionKind.CANCELLED)

        answer = answer.strip()
        if not answer:
            return SelectionResponse(kind=SelectionKind.CANCELLED)
        return SelectionResponse(kind=SelectionKind.SELECTED, paths=(Path(answer).expanduser(),))
