"""Spectrum analysis and beat detection of incoming audio."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Sequence

import numpy as np

FFT_ORDER = 10
FFT_SIZE = 1 << FFT_ORDER
SPECTRUM_BINS = 512
WAVEFORM_SIZE = 512
SMOOTHING_FACTOR = 0.8
ATTENUATION = 0.95
HISTORY_LENGTH = 8

BASS_BINS = (0, 30)
MID_BINS = (30, 180)
TREB_BINS = (180, 450)

BASS_HIT_LEVEL = 1.5
TREB_HIT_LEVEL = 2.9


def _hann_window(size: int) -> np.ndarray:
    """Hann window scaled so that its samples sum to ``size``."""
    n = np.arange(size)
    window = 0.5 - 0.5 * np.cos(2.0 * np.pi * n / (size - 1))
    return window * (size / window.sum())


def _smooth(previous: float, current: float) -> float:
    return previous * SMOOTHING_FACTOR + current * (1.0 - SMOOTHING_FACTOR)


def _attenuate(previous: float, current: float) -> float:
    return previous * ATTENUATION + current * (1.0 - ATTENUATION)


@dataclass(frozen=True)
class Beat:
    """Result of beat detection for one frame."""

    is_beat: bool
    is_bass_hit: bool
    is_treb_hit: bool
    intensity: float


class AudioAnalyzer:
    """Turns blocks of audio into a smoothed spectrum, band levels and beats."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._window = _hann_window(FFT_SIZE)
        self._fft_input = np.zeros(FFT_SIZE)
        self._fft_data = np.zeros(SPECTRUM_BINS)
        self._waveform = np.zeros(WAVEFORM_SIZE)

        self._bass = 0.0
        self._mid = 0.0
        self._treb = 0.0
        self._bass_att = 0.0
        self._mid_att = 0.0
        self._treb_att = 0.0

        self._bass_history = [0.0] * HISTORY_LENGTH
        self._treb_history = [0.0] * HISTORY_LENGTH
        self._history_index = 0
        self.beat_threshold = 1.5

    @property
    def fft_data(self) -> np.ndarray:
        """Smoothed magnitudes of the first 512 frequency bins."""
        return self._fft_data.copy()

    @property
    def waveform_data(self) -> np.ndarray:
        """The most recent 512 mono samples."""
        return self._waveform.copy()

    @property
    def bass(self) -> float:
        return self._bass

    @property
    def mid(self) -> float:
        return self._mid

    @property
    def treb(self) -> float:
        return self._treb

    @property
    def bass_att(self) -> float:
        return self._bass_att

    @property
    def mid_att(self) -> float:
        return self._mid_att

    @property
    def treb_att(self) -> float:
        return self._treb_att

    def process_block(self, channels: Sequence[Sequence[float]]) -> None:
        """Analyse one block given as equal-length sample sequences, one per channel."""
        blocks = [np.asarray(channel, dtype=np.float64) for channel in channels]
        if not blocks:
            return
        length = blocks[0].shape[0] if blocks[0].ndim == 1 else -1
        if any(block.ndim != 1 or block.shape[0] != length for block in blocks):
            raise ValueError("all channels must be one-dimensional and of equal length")
        if length == 0:
            return

        mono = np.mean(np.vstack(blocks), axis=0)

        with self._lock:
            count = min(length, FFT_SIZE)
            self._fft_input[:count] = mono[:count]
            self._fft_input *= self._window
            self._fft_input = np.abs(np.fft.fft(self._fft_input))

            spectrum = self._fft_input[:SPECTRUM_BINS]
            self._fft_data = (
                self._fft_data * SMOOTHING_FACTOR + spectrum * (1.0 - SMOOTHING_FACTOR)
            )

            count = min(length, WAVEFORM_SIZE)
            self._waveform[:count] = mono[:count]

            self._update_bands()
            self._update_history()

    def _band_average(self, start: int, end: int) -> float:
        band = self._fft_data[start:end + 1]
        return float(band.mean()) if band.size else 0.0

    def _update_bands(self) -> None:
        self._bass = _smooth(self._bass, self._band_average(*BASS_BINS))
        self._mid = _smooth(self._mid, self._band_average(*MID_BINS))
        self._treb = _smooth(self._treb, self._band_average(*TREB_BINS))

        self._bass_att = _attenuate(self._bass_att, self._bass)
        self._mid_att = _attenuate(self._mid_att, self._mid)
        self._treb_att = _attenuate(self._treb_att, self._treb)

    def _update_history(self) -> None:
        self._bass_history[self._history_index] = self._bass
        self._treb_history[self._history_index] = self._treb
        self._history_index = (self._history_index + 1) % HISTORY_LENGTH

    def detect_beat(self) -> Beat:
        """Report bass and treble hits relative to the recent history."""
        with self._lock:
            bass_avg = sum(self._bass_history) / HISTORY_LENGTH
            treb_avg = sum(self._treb_history) / HISTORY_LENGTH
            bass_hit = self._bass > bass_avg * self.beat_threshold and self._bass > BASS_HIT_LEVEL
            treb_hit = self._treb > treb_avg * self.beat_threshold and self._treb > TREB_HIT_LEVEL
            return Beat(
                is_beat=bass_hit or treb_hit,
                is_bass_hit=bass_hit,
                is_treb_hit=treb_hit,
                intensity=max(self._bass, self._treb),
            )