"""
Global configuration for Infinite Note

Holds application metadata, canvas constants and the sketch variant presets.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Final

from PyQt6.QtCore import QSettings, QStandardPaths


ERASE_MODE_LASSO: Final[str] = "lasso"
ERASE_MODE_HOLD: Final[str] = "hold"


@dataclass(frozen=True)
class SketchConfig:
    """
    Tunables that distinguish the product variants.

    Both variants share one engine; only these values differ.
    """

    erase_mode: str = ERASE_MODE_LASSO
    intersection_threshold: int = 8
    hold_duration_ms: int = 500
    hold_hit_width: float = 80.0  # half-width of the invisible hit region, canvas units
    momentum_decay: float = 64 / 65
    sensitivity: float = 1 / 16
    tile_size: int = 1280
    noise_length_threshold: float = 8.0

    def __post_init__(self):
        if self.erase_mode not in (ERASE_MODE_LASSO, ERASE_MODE_HOLD):
            raise ValueError(f"Invalid erase mode: {self.erase_mode}")
        if not 0 < self.momentum_decay < 1:
            raise ValueError(f"Momentum decay must be in (0, 1): {self.momentum_decay}")
        if self.tile_size <= 0:
            raise ValueError(f"Tile size must be positive: {self.tile_size}")


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Infinite Note"
    APP_VERSION: Final[str] = "1.0.0"
    APP_AUTHOR: Final[str] = "InfiniteNote"

    # Canvas geometry (canvas units; one screen pixel = VIEWPORT_ZOOM units)
    VIEWPORT_ZOOM: Final[int] = 10
    GRID_SIZE: Final[int] = 32 * VIEWPORT_ZOOM
    TILE_SIZE: Final[int] = 4 * GRID_SIZE
    INITIAL_TILE_MARGIN: Final[int] = 4  # extra tiles around the first viewport
    INITIAL_SCROLL_TILES: Final[float] = 1.5

    # Colors
    BACKGROUND_COLOR: Final[str] = "#fafaef"
    TEXT_COLOR: Final[tuple] = (0, 0, 0, 0.87)  # RGBA, alpha normalized
    GRID_DOT_COLOR: Final[tuple] = (0, 0, 0, 0.05)
    TILE_DOT_COLOR: Final[tuple] = (0, 0, 0, 0.2)

    # Timing
    EDGE_GROWTH_DEBOUNCE_MS: Final[int] = 500
    SAVE_DEBOUNCE_MS: Final[int] = 100
    SCROLL_TICK_MS: Final[int] = 16  # ~60 Hz

    # Input
    MOUSE_PRESSURE: Final[float] = 0.5
    MOUSE_POINTER_ID: Final[int] = 1
    TABLET_POINTER_ID: Final[int] = 2

    # Export
    EXPORT_PADDING: Final[int] = 8
    EXPORT_ZOOM: Final[int] = 8
    EXPORT_FILENAME: Final[str] = "note.png"

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 1200
    DEFAULT_WINDOW_HEIGHT: Final[int] = 800

    # Variant presets
    VARIANT_SETTING_KEY: Final[str] = "sketch/variant"
    VARIANT_ENV_VAR: Final[str] = "INFINITE_NOTE_VARIANT"
    DEFAULT_VARIANT: Final[str] = ERASE_MODE_LASSO
    VARIANTS: Final[Dict[str, SketchConfig]] = {
        ERASE_MODE_LASSO: SketchConfig(),
        ERASE_MODE_HOLD: SketchConfig(
            erase_mode=ERASE_MODE_HOLD,
            noise_length_threshold=0.0,
        ),
    }

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses AppData/Local (Windows), Application Support (macOS)
        or .local/share (Linux).
        """
        if sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'InfiniteNote'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'InfiniteNote'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'InfiniteNote'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the log folder path."""
        return cls.get_user_data_dir() / 'logs'

    @classmethod
    def get_download_dir(cls) -> Path:
        """Get the folder exported images are written to when sharing is unavailable."""
        location = QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.DownloadLocation
        )
        if location:
            return Path(location)
        return cls.get_user_data_dir() / 'exports'

    @classmethod
    def get_variant_name(cls) -> str:
        """Selected variant: environment variable first, then stored setting."""
        name = os.environ.get(cls.VARIANT_ENV_VAR)
        if not name:
            settings = QSettings(cls.APP_AUTHOR, cls.APP_NAME)
            name = settings.value(cls.VARIANT_SETTING_KEY, cls.DEFAULT_VARIANT, type=str)
        return name if name in cls.VARIANTS else cls.DEFAULT_VARIANT

    @classmethod
    def load_sketch_config(cls) -> SketchConfig:
        """Get the SketchConfig preset for the selected variant."""
        return cls.VARIANTS[cls.get_variant_name()]


__all__ = [
    'Config',
    'SketchConfig',
    'ERASE_MODE_LASSO',
    'ERASE_MODE_HOLD',
]
