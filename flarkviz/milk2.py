"""Reading and writing `.milk2` double presets."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from flarkviz.preset import MilkDropPreset, _parse_float, _parse_int, _split_lines


@dataclass
class DoublePreset:
    """Two presets blended together."""

    preset_a: MilkDropPreset = field(default_factory=MilkDropPreset)
    preset_b: MilkDropPreset = field(default_factory=MilkDropPreset)
    blend_factor: float = 0.5
    transition_type: int = 0
    transition_duration: float = 2.0


def _section_text(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def load_from_string(content: str) -> DoublePreset:
    """Parse `.milk2` text into a double preset."""
    result = DoublePreset()
    lines = _split_lines(content)

    a_start: int | None = None
    a_end: int | None = None
    b_start: int | None = None
    b_end: int | None = None
    meta_start: int | None = None

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if "[preset_a]" in line or "[preset00]" in line:
            if a_start is None:
                a_start = index
        elif "[preset_b]" in line:
            a_end = index
            b_start = index
        elif "[milk2_meta]" in line:
            if b_start is not None and b_end is None:
                b_end = index
            meta_start = index

    if b_end is None:
        b_end = len(lines)

    if meta_start is not None:
        for raw_line in lines[meta_start + 1:]:
            line = raw_line.strip()
            if not line or line.startswith("//") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key, value = key.strip(), value.strip()
            if key == "blend_factor":
                result.blend_factor = _parse_float(value)
            elif key == "transition_type":
                result.transition_type = _parse_int(value)
            elif key == "transition_duration":
                result.transition_duration = _parse_float(value)

    if a_start is not None and a_end is not None:
        result.preset_a.load_from_string(_section_text(lines[a_start:a_end]))

    if b_start is not None:
        result.preset_b.load_from_string(_section_text(lines[b_start:b_end]))

    return result


def load_from_file(path: str | os.PathLike[str]) -> DoublePreset:
    """Read the `.milk2` file at ``path``."""
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"No such preset file: {file_path}")
    return load_from_string(file_path.read_text(encoding="utf-8", errors="replace"))


def _number(value: float) -> str:
    return f"{value:g}"


def _preset_lines(preset: MilkDropPreset) -> list[str]:
    return [
        "[preset00]",
        f"fRating={_number(preset.rating)}",
        f"fGammaAdj={_number(preset.gamma_adj)}",
        f"fDecay={_number(preset.decay)}",
        "",
    ]


def format_double_preset(double_preset: DoublePreset) -> str:
    """Render a double preset as `.milk2` text."""
    lines = [
        "[milk2_meta]",
        "version=1.0",
        f"blend_factor={_number(double_preset.blend_factor)}",
        f"transition_type={double_preset.transition_type}",
        f"transition_duration={_number(double_preset.transition_duration)}",
        "",
        "[preset_a]",
        *_preset_lines(double_preset.preset_a),
        "[preset_b]",
        *_preset_lines(double_preset.preset_b),
    ]
    return "\n".join(lines) + "\n"


def save_to_file(double_preset: DoublePreset, path: str | os.PathLike[str]) -> None:
    """Write a double preset to ``path`` with CRLF line endings."""
    with open(path, "w", encoding="utf-8", newline="\r\n") as handle:
        handle.write(format_double_preset(double_preset))