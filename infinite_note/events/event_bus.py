"""
EventBus - application-level notifications

Pattern: Observer/Publisher-Subscriber

Carries shell-level events (export results, session resets, errors) so the
window, status bar and logging do not need references to each other.
Engine components keep their own signals; the bus is for the shell.
"""

from PyQt6.QtCore import QObject, pyqtSignal


class EventBus(QObject):
    """
    Central event bus for decoupled communication between UI components

    Usage:
        event_bus = EventBus()
        event_bus.error_occurred.connect(some_handler)
        event_bus.report_error("export", "Couldn't get a painter")
    """

    # Export events
    export_started = pyqtSignal()
    export_finished = pyqtSignal(str, str)  # method, path ('' when not saved)

    # Session events
    session_mounted = pyqtSignal(int)  # stroke count
    session_cleared = pyqtSignal()

    # Error events
    error_occurred = pyqtSignal(str, str)  # error_type, error_message

    def report_error(self, error_type: str, message: str):
        """
        Report an error to the UI

        Args:
            error_type: Type of error (e.g., "export", "session")
            message: Human-readable error message
        """
        self.error_occurred.emit(error_type, message)


__all__ = ['EventBus']
