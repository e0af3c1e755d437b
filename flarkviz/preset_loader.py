"""Loading single presets from `.milk` files or text."""

from __future__ import annotations

import os
from pathlib import Path

from flarkviz.preset import MilkDropPreset


class PresetLoadError(Exception):
    """Raised when a preset cannot be loaded."""


def load_preset(path: str | os.PathLike[str]) -> MilkDropPreset:
    """Load the `.milk` preset at ``path``."""
    file_path = Path(path)
    if not file_path.is_file():
        raise PresetLoadError(f"File does not exist: {file_path.resolve()}")
    if file_path.suffix != ".milk":
        raise PresetLoadError(f"Not a .milk file: {file_path.name}")

    preset = MilkDropPreset()
    try:
        preset.load_from_file(file_path)
    except (OSError, ValueError) as error:
        raise PresetLoadError(f"Failed to parse preset file: {file_path.name}") from error
    return preset


def load_preset_from_string(content: str) -> MilkDropPreset:
    """Build a preset from `.milk` text."""
    preset = MilkDropPreset()
    try:
        preset.load_from_string(content)
    except ValueError as error:
        raise PresetLoadError("Failed to parse preset from string") from error
    return preset