"""Centralized exception hierarchy for wingetctl.

Only faults are raised. Outcomes winget itself reports (a failed install, a
declined elevation prompt) are returned as ``OperationResult`` values instead.
"""


class WingetCtlError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, retriable: bool = False, **params: object) -> None:
        """
        Initialize the error.

        Args:
            message: English message template, formatted with ``params``
            retriable: Whether the operation can be retried
            **params: Values substituted into the message template
        """
        super().__init__(message)
        self.message = message
        self.retriable = retriable
        self.params = params

    def __str__(self) -> str:
        try:
            return self.message.format(**self.params)
        except (KeyError, IndexError, ValueError):
            params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
            return f"{self.message} [{params_str}]"


class InvocationError(WingetCtlError):
    """Raised when the winget executable could not be started or the run itself failed."""

    def __init__(self, message: str, retriable: bool = False, **params: object) -> None:
        super().__init__(message, retriable=retriable, **params)


class CommandTimeoutError(InvocationError):
    """Raised when a bounded wait on a winget process expires."""

    def __init__(self, message: str, **params: object) -> None:
        super().__init__(message, retriable=True, **params)


class ConfigError(WingetCtlError):
    """Raised when the configuration file cannot be read or validated."""
