"""Custom exceptions for supportwindow."""


class SupportWindowError(Exception):
    """Base exception for all supportwindow errors."""


class EngineInputError(SupportWindowError):
    """Raised when the policy engine is called with inputs that break its contract."""


class ScheduleError(SupportWindowError):
    """Raised when runtime schedule data cannot be loaded or is invalid."""


class ProjectInputError(SupportWindowError):
    """Raised when the prepared dependency list for a project cannot be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigError(SupportWindowError):
    """Raised when an environment setting has an invalid value."""
