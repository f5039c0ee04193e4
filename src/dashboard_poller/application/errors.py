"""Application-specific exceptions."""


class SchedulerConfigError(ValueError):
    """Raised when a scheduler is constructed with invalid settings."""


class VisibilityNotConfiguredError(RuntimeError):
    """Raised when visibility handling is requested without a signal."""
