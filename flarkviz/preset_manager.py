"""Library of preset files on disk and navigation between them."""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def default_presets_folder() -> Path:
    """Folder scanned when no other is given."""
    return Path.home() / "Documents" / "FlarkViz" / "presets"


class PresetManager:
    """Keeps the list of preset files, the current one and a history for going back."""

    def __init__(
        self,
        folder: str | os.PathLike[str] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._presets: list[Path] = []
        self._current_index = 0
        self._history: list[int] = []
        self._rng = rng if rng is not None else random.Random()

        if folder is None:
            presets_folder = default_presets_folder()
            if not presets_folder.exists():
                presets_folder.mkdir(parents=True, exist_ok=True)
                logger.info("Created presets folder at %s", presets_folder)
        else:
            presets_folder = Path(folder)
        self.scan_presets_folder(presets_folder)

    @property
    def presets(self) -> tuple[Path, ...]:
        """The preset files found by the last scan."""
        return tuple(self._presets)

    @property
    def preset_count(self) -> int:
        return len(self._presets)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_preset(self) -> Path | None:
        """Path of the current preset, or None when the library is empty."""
        if 0 <= self._current_index < len(self._presets):
            return self._presets[self._current_index]
        return None

    @property
    def history(self) -> list[int]:
        """Indices visited before each random jump, oldest first."""
        return list(self._history)

    def scan_presets_folder(self, folder: str | os.PathLike[str]) -> None:
        """Replace the library with every `.milk` and then `.milk2` file below ``folder``."""
        self._presets = []
        root = Path(folder)
        if not root.exists():
            logger.info("Presets folder does not exist: %s", root)
            return

        for pattern in ("*.milk", "*.milk2"):
            self._presets.extend(
                sorted(path for path in root.rglob(pattern) if path.is_file())
            )
        logger.info("Found %d presets", len(self._presets))

    def select_preset(self, index: int) -> Path:
        """Make the preset at ``index`` current and return its path."""
        if not 0 <= index < len(self._presets):
            raise IndexError(f"preset index out of range: {index}")
        self._current_index = index
        return self._presets[index]

    def load_random_preset(self) -> Path | None:
        """Jump to a random preset, remembering the current one; None if there are none."""
        if not self._presets:
            logger.info("No presets available")
            return None

        self._history.append(self._current_index)
        if len(self._history) > HISTORY_LIMIT:
            del self._history[0]

        self._current_index = self._rng.randrange(len(self._presets))
        logger.debug("Loading random preset: %s", self._presets[self._current_index].name)
        return self._presets[self._current_index]

    def load_next_preset(self) -> Path | None:
        """Step to the next preset, wrapping at the end; None if there are none."""
        if not self._presets:
            return None
        self._current_index = (self._current_index + 1) % len(self._presets)
        logger.debug("Loading next preset: %s", self._presets[self._current_index].name)
        return self._presets[self._current_index]

    def load_previous_preset(self) -> Path | None:
        """Return to the preset before the last random jump; None when the history is empty."""
        if not self._history:
            return None
        self._current_index = self._history.pop()
        logger.debug("Loading previous preset from history")
        return self.current_preset