"""
Base exceptions for Stable Locator.

Errors fall into two groups. Failures local to one frame or one candidate
selector are absorbed by the engine and only logged. Failures of a whole
operation (nothing matched, several elements matched, the browser or the
configuration could not be loaded) reach the caller as StableLocatorError
subclasses.
"""


class StableLocatorError(Exception):
    """
    Root of every error raised by the resolution engine, its browser adapters
    and its configuration layer.

    Attributes:
        message: Human-readable error message
        details: Context for the failure, such as the selector or frame
            paths involved. Keys whose value is None are dropped.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(StableLocatorError):
    """
    Settings could not be loaded.

    Raised for malformed YAML config files and files whose top level is
    not a mapping.
    """
    pass
