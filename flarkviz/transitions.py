"""Spatial blend patterns for transitions between two presets."""

from __future__ import annotations

import math
import time
from enum import Enum
from typing import Callable

_PI = 3.14159265
_TWO_PI = 2.0 * _PI
_MAX_CENTRE_DISTANCE = math.sqrt(0.5 * 0.5 + 0.5 * 0.5)
_CHECKER_GRID = 16
_STAR_POINTS = 5
_MASK32 = 0xFFFFFFFF
_DEFAULT_SEED = 12345


class TransitionType(Enum):
    """Available transition patterns."""

    NONE = 0
    CROSSFADE = 1
    FADE_TO_BLACK = 2
    FADE_TO_WHITE = 3

    WIPE_LEFT = 10
    WIPE_RIGHT = 11
    WIPE_UP = 12
    WIPE_DOWN = 13
    WIPE_DIAGONAL_TL = 14
    WIPE_DIAGONAL_TR = 15

    CIRCULAR_EXPAND = 20
    CIRCULAR_CONTRACT = 21
    RADIAL_WIPE = 22
    SPIRAL_OUT = 23
    SPIRAL_IN = 24

    CHECKERBOARD_FADE = 30
    GRID_SLIDE = 31
    PIXEL_DISSOLVE = 32
    BLOCK_DISSOLVE = 33
    RANDOM_BLOCKS = 34

    WAVE_HORIZONTAL = 40
    WAVE_VERTICAL = 41
    WAVE_DIAGONAL = 42
    RIPPLE = 43

    DIAMOND_WIPE = 50
    HEART_WIPE = 51
    STAR_WIPE = 52
    CLOCK_WIPE = 53
    IRIS_IN = 54
    IRIS_OUT = 55

    GLITCH = 60
    MOTION_BLUR = 61
    ZOOM_IN = 62
    ZOOM_OUT = 63
    ROTATE = 64
    PIXELATE = 65


_TRANSITION_NAMES = (
    "None", "Crossfade", "Fade to Black", "Fade to White",
    "Wipe Left", "Wipe Right", "Wipe Up", "Wipe Down",
    "Wipe Diagonal TL", "Wipe Diagonal TR",
    "Circular Expand", "Circular Contract", "Radial Wipe",
    "Spiral Out", "Spiral In",
    "Checkerboard", "Grid Slide", "Pixel Dissolve",
    "Block Dissolve", "Random Blocks",
    "Wave Horizontal", "Wave Vertical", "Wave Diagonal", "Ripple",
    "Diamond Wipe", "Heart Wipe", "Star Wipe", "Clock Wipe",
    "Iris In", "Iris Out",
    "Glitch", "Motion Blur", "Zoom In", "Zoom Out", "Rotate", "Pixelate",
)


def transition_names() -> list[str]:
    """Display names of all transitions, in declaration order."""
    return list(_TRANSITION_NAMES)


def transition_type_from_name(name: str) -> TransitionType:
    """Find a transition by display name, ignoring case; unknown names give CROSSFADE."""
    wanted = name.casefold()
    for candidate, transition_type in zip(_TRANSITION_NAMES, TransitionType):
        if candidate.casefold() == wanted:
            return transition_type
    return TransitionType.CROSSFADE


def _ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 2) / 2.0


def _centre_offset(x: float, y: float) -> tuple[float, float]:
    return x - 0.5, y - 0.5


class TransitionEngine:
    """Tracks the progress of a transition and computes per-pixel blend factors."""

    def __init__(self) -> None:
        self._active = False
        self._current_type = TransitionType.CROSSFADE
        self._progress = 0.0
        self._duration = 2.0
        self._elapsed = 0.0
        self._seed = _DEFAULT_SEED
        self._patterns: dict[TransitionType, Callable[[float, float], float]] = {
            TransitionType.NONE: self._none,
            TransitionType.CROSSFADE: self._crossfade,
            TransitionType.WIPE_LEFT: self._wipe_left,
            TransitionType.WIPE_RIGHT: self._wipe_right,
            TransitionType.WIPE_UP: self._wipe_up,
            TransitionType.WIPE_DOWN: self._wipe_down,
            TransitionType.CIRCULAR_EXPAND: self._circular_expand,
            TransitionType.CIRCULAR_CONTRACT: self._circular_contract,
            TransitionType.RADIAL_WIPE: self._radial_wipe,
            TransitionType.SPIRAL_OUT: self._spiral,
            TransitionType.SPIRAL_IN: self._spiral,
            TransitionType.CHECKERBOARD_FADE: self._checkerboard,
            TransitionType.PIXEL_DISSOLVE: self._pixel_dissolve,
            TransitionType.RANDOM_BLOCKS: self._pixel_dissolve,
            TransitionType.IRIS_IN: self._circular_expand,
            TransitionType.IRIS_OUT: self._circular_contract,
            TransitionType.DIAMOND_WIPE: self._diamond_wipe,
            TransitionType.STAR_WIPE: self._star_wipe,
            TransitionType.CLOCK_WIPE: self._clock_wipe,
        }

    @property
    def progress(self) -> float:
        """Progress from 0.0 (start) to 1.0 (end)."""
        return self._progress

    @property
    def is_active(self) -> bool:
        """Whether a transition is running."""
        return self._active

    @property
    def current_type(self) -> TransitionType:
        """The pattern of the current or last transition."""
        return self._current_type

    @property
    def duration(self) -> float:
        """Length of the current transition in seconds."""
        return self._duration

    def start_transition(self, transition_type: TransitionType, duration: float) -> None:
        """Begin a transition of the given pattern lasting ``duration`` seconds."""
        self._current_type = transition_type
        self._duration = duration
        self._progress = 0.0
        self._elapsed = 0.0
        self._active = True
        self._seed = int(time.time() * 1000) & _MASK32

    def update(self, delta_time: float) -> None:
        """Advance the running transition by ``delta_time`` seconds."""
        if not self._active:
            return
        self._elapsed += delta_time
        if self._duration == 0.0:
            ratio = 1.0
        else:
            ratio = self._elapsed / self._duration
        self._progress = min(1.0, ratio)
        if self._progress >= 1.0:
            self._active = False

    def stop(self) -> None:
        """End the transition at once."""
        self._active = False
        self._progress = 1.0

    def blend_factor_at(self, x: float, y: float) -> float:
        """Blend from 0.0 (preset A) to 1.0 (preset B) at normalised point (x, y)."""
        pattern = self._patterns.get(self._current_type)
        if pattern is None:
            return _ease_in_out(self._progress)
        return pattern(x, y)

    # -- patterns ------------------------------------------------------

    def _threshold(self) -> float:
        return _ease_in_out(self._progress)

    def _none(self, x: float, y: float) -> float:
        return float(self._progress >= 0.5)

    def _crossfade(self, x: float, y: float) -> float:
        return self._threshold()

    def _wipe_left(self, x: float, y: float) -> float:
        return float(x < self._threshold())

    def _wipe_right(self, x: float, y: float) -> float:
        return float(x > 1.0 - self._threshold())

    def _wipe_up(self, x: float, y: float) -> float:
        return float(y < self._threshold())

    def _wipe_down(self, x: float, y: float) -> float:
        return float(y > 1.0 - self._threshold())

    @staticmethod
    def _normalised_distance(x: float, y: float) -> float:
        dx, dy = _centre_offset(x, y)
        return math.hypot(dx, dy) / _MAX_CENTRE_DISTANCE

    def _circular_expand(self, x: float, y: float) -> float:
        return float(self._normalised_distance(x, y) < self._threshold())

    def _circular_contract(self, x: float, y: float) -> float:
        return float(self._normalised_distance(x, y) > 1.0 - self._threshold())

    def _radial_wipe(self, x: float, y: float) -> float:
        dx, dy = _centre_offset(x, y)
        normalised_angle = (math.atan2(dy, dx) + _PI) / _TWO_PI
        return float(normalised_angle < self._threshold())

    def _checkerboard(self, x: float, y: float) -> float:
        ix = int(x * _CHECKER_GRID)
        iy = int(y * _CHECKER_GRID)
        threshold = self._threshold()
        local = threshold if (ix + iy) % 2 == 0 else threshold * 0.7
        return float(local > 0.5)

    def _pixel_dissolve(self, x: float, y: float) -> float:
        return float(self._pseudo_random(x, y) < self._threshold())

    def _spiral(self, x: float, y: float) -> float:
        dx, dy = _centre_offset(x, y)
        value = math.atan2(dy, dx) / _TWO_PI + math.hypot(dx, dy) * 2.0
        value -= math.floor(value)
        return float(value < self._threshold())

    def _diamond_wipe(self, x: float, y: float) -> float:
        distance = abs(x - 0.5) + abs(y - 0.5)
        return float(distance < self._threshold())

    def _star_wipe(self, x: float, y: float) -> float:
        dx, dy = _centre_offset(x, y)
        star = math.sin(math.atan2(dy, dx) * _STAR_POINTS) * 0.3 + 0.7
        normalised = math.hypot(dx, dy) / (star * 0.7)
        return float(normalised < self._threshold())

    def _clock_wipe(self, x: float, y: float) -> float:
        dx, dy = _centre_offset(x, y)
        angle = math.atan2(dy, dx) + _PI / 2.0
        if angle < 0.0:
            angle += _TWO_PI
        return float(angle / _TWO_PI < self._threshold())

    def _pseudo_random(self, x: float, y: float) -> float:
        ix = int(x * 10000.0) & _MASK32
        iy = int(y * 10000.0) & _MASK32
        seed = (ix * 374761393 + iy * 668265263 + self._seed) & _MASK32
        seed = ((seed ^ (seed >> 13)) * 1274126177) & _MASK32
        return (seed & 0xFFFFFF) / 16777216.0