"""
Centralized logging configuration for Infinite Note
"""
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional


LOG_LEVEL_ENV_VAR = "INFINITE_NOTE_LOG_LEVEL"


class LoggingConfig:
    """Central logging configuration"""

    _initialized = False
    _log_file_path: Optional[Path] = None
    _handlers: List[logging.Handler] = []

    @classmethod
    def setup_logging(cls, log_dir: Path, console_level: Optional[str] = None):
        """
        Setup logging system

        Args:
            log_dir: Folder for infinite_note.log (DEBUG and up)
            console_level: Level name for stdout; defaults to the
                INFINITE_NOTE_LOG_LEVEL environment variable, then INFO
        """
        if cls._initialized:
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / "infinite_note.log"

        level_name = (console_level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.INFO

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)

        # File handler: full detail for bug reports
        file_handler = logging.FileHandler(cls._log_file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))

        for handler in (file_handler, console_handler):
            root.addHandler(handler)
            cls._handlers.append(handler)

        cls._initialized = True
        root.info(f"Logging to {cls._log_file_path} (console level {logging.getLevelName(level)})")

    @classmethod
    def shutdown(cls):
        """Detach and close the handlers added by setup_logging."""
        root = logging.getLogger()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._initialized = False
        cls._log_file_path = None

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        """Get the log file path"""
        return cls._log_file_path


__all__ = ['LoggingConfig', 'LOG_LEVEL_ENV_VAR']
