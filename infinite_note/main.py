"""
Infinite Note - Main Entry Point

A freehand sketchpad on a canvas that keeps growing as you scroll.

Usage:
    python -m infinite_note.main
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .config import Config
from .utils.logging_config import LoggingConfig


def setup_application() -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)

    # Set application metadata
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)

    return app


def main():
    """
    Main entry point for Infinite Note

    Creates the application, shows the main window, and runs the event loop.
    """
    # Setup logging first
    LoggingConfig.setup_logging(Config.get_log_dir())

    logger = logging.getLogger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")

    app = setup_application()

    variant = Config.get_variant_name()
    logger.info(f"Variant: {variant}")

    # Create and show main window
    from .widgets.main_window import MainWindow
    window = MainWindow(sketch_config=Config.VARIANTS[variant])
    window.show()
    window.mount_session()

    logger.info("Application started successfully!")

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
