"""Data model and parser for single `.milk` preset files."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _split_lines(content: str) -> list[str]:
    """Split text at any of the usual line endings."""
    return _LINE_BREAK.split(content)


def _parse_float(text: str) -> float:
    """Read the leading decimal number of ``text``; 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _parse_int(text: str) -> int:
    """Read the leading integer of ``text``; 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _parse_bool(text: str) -> bool:
    return _parse_int(text) != 0


@dataclass
class WaveOrShape:
    """A custom wave or shape block of a preset."""

    enabled: bool = False
    sides: int = 4
    thick: bool = False
    additive: bool = False
    dots: bool = False
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0
    x: float = 0.5
    y: float = 0.5
    rad: float = 0.3
    ang: float = 0.0
    tex_ang: float = 0.0
    tex_zoom: float = 1.0
    init_code: str = ""
    per_frame_code: str = ""
    per_point_code: str = ""


_Converter = Callable[[str], object]

_PRESET_KEYS: dict[str, tuple[str, _Converter]] = {
    "name": ("name", str),
    "MILKDROP_PRESET_VERSION": ("name", str),
    "author": ("author", str),
    "fRating": ("rating", _parse_float),
    "fGammaAdj": ("gamma_adj", _parse_float),
    "fDecay": ("decay", _parse_float),
    "fVideoEchoZoom": ("video_echo_zoom", _parse_float),
    "fVideoEchoAlpha": ("video_echo_alpha", _parse_float),
    "nVideoEchoOrientation": ("video_echo_orientation", _parse_int),
    "nWaveMode": ("wave_mode", _parse_int),
    "bAdditiveWaves": ("additive_waves", _parse_bool),
    "bWaveDots": ("wave_dots", _parse_bool),
    "bWaveThick": ("wave_thick", _parse_bool),
    "bModWaveAlphaByVolume": ("mod_wave_alpha_by_volume", _parse_bool),
    "bMaximizeWaveColor": ("maximize_wave_color", _parse_bool),
    "bTexWrap": ("tex_wrap", _parse_bool),
    "bDarkenCenter": ("darken_center", _parse_bool),
    "bRedBlueStereo": ("red_blue_stereo", _parse_bool),
    "bBrighten": ("brighten", _parse_bool),
    "bDarken": ("darken", _parse_bool),
    "bSolarize": ("solarize", _parse_bool),
    "bInvert": ("invert", _parse_bool),
    "fWaveAlpha": ("wave_alpha", _parse_float),
    "fWaveScale": ("wave_scale", _parse_float),
    "fWaveSmoothing": ("wave_smoothing", _parse_float),
    "fWaveParam": ("wave_param", _parse_float),
    "fModWaveAlphaStart": ("mod_wave_alpha_start", _parse_float),
    "fModWaveAlphaEnd": ("mod_wave_alpha_end", _parse_float),
    "fWarpAnimSpeed": ("warp_anim_speed", _parse_float),
    "fWarpScale": ("warp_scale", _parse_float),
    "fZoomExponent": ("zoom_exponent", _parse_float),
    "fShader": ("shader", _parse_float),
    "fRotCX": ("rot_cx", _parse_float),
    "fRotCY": ("rot_cy", _parse_float),
    "fRot": ("rot", _parse_float),
    "fXPush": ("x_push", _parse_float),
    "fYPush": ("y_push", _parse_float),
    "fWarpAmount": ("warp_amount", _parse_float),
    "fStretchX": ("stretch_x", _parse_float),
    "fStretchY": ("stretch_y", _parse_float),
    "wave_r": ("wave_r", _parse_float),
    "wave_g": ("wave_g", _parse_float),
    "wave_b": ("wave_b", _parse_float),
}

_WAVE_KEYS: dict[str, tuple[str, _Converter]] = {
    "enabled": ("enabled", _parse_bool),
    "r": ("r", _parse_float),
    "g": ("g", _parse_float),
    "b": ("b", _parse_float),
    "a": ("a", _parse_float),
}

_SHAPE_KEYS: dict[str, tuple[str, _Converter]] = {
    "enabled": ("enabled", _parse_bool),
    "sides": ("sides", _parse_int),
    "thick": ("thick", _parse_bool),
    "additive": ("additive", _parse_bool),
    "r": ("r", _parse_float),
    "g": ("g", _parse_float),
    "b": ("b", _parse_float),
    "a": ("a", _parse_float),
    "rad": ("rad", _parse_float),
}

# Sections whose bare lines are gathered as code, and where that code is kept.
_CODE_SECTIONS = {
    "per_frame_init_1": "per_frame_init_code",
    "per_frame_1": "per_frame_code",
    "per_pixel_1": "per_pixel_code",
    "warp_1": "warp_shader_code",
    "comp_1": "comp_shader_code",
}

# Names checked when a new section header interrupts gathered code.
_INTERRUPTED_CODE_SECTIONS = {
    "per_frame_init_code": "per_frame_init_code",
    "per_frame_code": "per_frame_code",
    "per_pixel_code": "per_pixel_code",
    "warp_shader": "warp_shader_code",
    "comp_shader": "comp_shader_code",
}

# Fields that reset() restores; the remaining fields keep their values.
_RESET_FIELDS = (
    "name", "author", "variables", "waves", "shapes",
    "per_frame_init_code", "per_frame_code", "per_pixel_code",
    "warp_shader_code", "comp_shader_code",
    "rating", "gamma_adj", "decay", "video_echo_zoom", "video_echo_alpha",
    "video_echo_orientation", "wave_mode",
    "additive_waves", "wave_dots", "wave_thick", "mod_wave_alpha_by_volume",
    "maximize_wave_color", "tex_wrap", "darken_center", "red_blue_stereo",
    "brighten", "darken", "solarize", "invert",
    "wave_alpha", "wave_scale", "wave_smoothing",
)


def _section_index(section: str, offset: int) -> int:
    """Index encoded by the single character after a ``wave_``/``shape_`` prefix."""
    char = section[offset] if len(section) > offset else "\0"
    index = ord(char) - ord("0")
    if index < 0 or ord(char) > 127:
        raise ValueError(f"invalid section index in [{section}]")
    return index


@dataclass
class MilkDropPreset:
    """All parameters, equations and shader code of one preset."""

    name: str = ""
    author: str = ""

    rating: float = 3.0
    gamma_adj: float = 1.0
    decay: float = 0.98
    video_echo_zoom: float = 1.0
    video_echo_alpha: float = 0.5
    video_echo_orientation: int = 0
    wave_mode: int = 0
    additive_waves: bool = False
    wave_dots: bool = False
    wave_thick: bool = False
    mod_wave_alpha_by_volume: bool = False
    maximize_wave_color: bool = False
    tex_wrap: bool = False
    darken_center: bool = False
    red_blue_stereo: bool = False
    brighten: bool = False
    darken: bool = False
    solarize: bool = False
    invert: bool = False

    wave_alpha: float = 0.8
    wave_scale: float = 1.0
    wave_smoothing: float = 0.75
    wave_param: float = 0.0
    mod_wave_alpha_start: float = 0.75
    mod_wave_alpha_end: float = 0.95
    warp_anim_speed: float = 1.0
    warp_scale: float = 1.0
    zoom_exponent: float = 1.0
    shader: float = 0.0

    rot_cx: float = 0.5
    rot_cy: float = 0.5
    rot: float = 0.0
    x_push: float = 0.0
    y_push: float = 0.0
    warp_amount: float = 1.0
    stretch_x: float = 1.0
    stretch_y: float = 1.0

    outer_border_size: float = 0.01
    outer_border_r: float = 0.0
    outer_border_g: float = 0.0
    outer_border_b: float = 0.0
    outer_border_a: float = 0.0

    inner_border_size: float = 0.01
    inner_border_r: float = 0.25
    inner_border_g: float = 0.25
    inner_border_b: float = 0.25
    inner_border_a: float = 0.0

    mv_x: float = 12.0
    mv_y: float = 9.0
    mv_dx: float = 0.0
    mv_dy: float = 0.0
    mv_l: float = 1.0
    mv_r: float = 1.0
    mv_g: float = 1.0
    mv_b: float = 1.0
    mv_a: float = 1.0

    wave_r: float = 1.0
    wave_g: float = 1.0
    wave_b: float = 1.0
    wave_x: float = 0.5
    wave_y: float = 0.5
    wave_mystery: float = 0.0

    per_frame_init_code: str = ""
    per_frame_code: str = ""
    per_pixel_code: str = ""
    warp_shader_code: str = ""
    comp_shader_code: str = ""

    waves: list[WaveOrShape] = field(default_factory=list)
    shapes: list[WaveOrShape] = field(default_factory=list)

    variables: dict[str, float] = field(default_factory=dict)

    def reset(self) -> None:
        """Clear metadata, code, waves and shapes and restore the basic parameters."""
        fresh = MilkDropPreset()
        for name in _RESET_FIELDS:
            setattr(self, name, getattr(fresh, name))

    def load_from_file(self, path: str | os.PathLike[str]) -> None:
        """Parse the preset stored at ``path``."""
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"No such preset file: {file_path}")
        self.load_from_string(file_path.read_text(encoding="utf-8", errors="replace"))

    def load_from_string(self, content: str) -> None:
        """Reset this preset and fill it from ``.milk`` text."""
        self.reset()

        section = ""
        code_lines: list[str] = []
        gathering = False
        wave_index = -1
        shape_index = -1

        for raw_line in _split_lines(content):
            line = raw_line.strip()
            if not line or line.startswith("//"):
                continue

            if line.startswith("["):
                if gathering:
                    gathering = False
                    target = _INTERRUPTED_CODE_SECTIONS.get(section)
                    if target is not None:
                        setattr(self, target, "\n".join(code_lines))
                    code_lines = []

                section = line[1:].split("]", 1)[0]
                if section.startswith("wave_"):
                    wave_index = _section_index(section, 5)
                    self._grow(self.waves, wave_index)
                elif section.startswith("shape_"):
                    shape_index = _section_index(section, 6)
                    self._grow(self.shapes, shape_index)
                continue

            if "=" in line:
                key, _, value = line.partition("=")
                self._apply(key.strip(), value.strip(), wave_index, shape_index)
                continue

            if section in _CODE_SECTIONS:
                code_lines.append(line)
                gathering = True

        if gathering:
            setattr(self, _CODE_SECTIONS[section], "\n".join(code_lines))

    @staticmethod
    def _grow(items: list[WaveOrShape], index: int) -> None:
        items.extend(WaveOrShape() for _ in range(index + 1 - len(items)))
        items[index].enabled = True

    def _apply(self, key: str, value: str, wave_index: int, shape_index: int) -> None:
        entry = _PRESET_KEYS.get(key)
        if entry is not None:
            attr, convert = entry
            setattr(self, attr, convert(value))
            return

        if 0 <= wave_index < len(self.waves):
            target, table = self.waves[wave_index], _WAVE_KEYS
        elif 0 <= shape_index < len(self.shapes):
            target, table = self.shapes[shape_index], _SHAPE_KEYS
        else:
            return

        entry = table.get(key)
        if entry is not None:
            attr, convert = entry
            setattr(target, attr, convert(value))