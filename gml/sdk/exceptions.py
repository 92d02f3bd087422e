class GmlError(Exception):
    """Base class for all gml exceptions."""
    pass

class ConfigError(GmlError):
    """Raised when the configuration file or credential paths are missing or invalid."""
    pass

class AuthError(GmlError):
    """Raised when credentials cannot be loaded, refreshed, or obtained."""
    pass

class LabelNotFoundError(GmlError):
    """Raised when a requested label matches neither a label name nor a label ID."""

    def __init__(self, label: str):
        super().__init__(f"label not found: {label}")
        self.label = label

class FetchError(GmlError):
    """Raised when a Gmail API call fails."""
    pass

class OperationCancelledError(GmlError):
    """Raised when an operation is interrupted or its deadline has passed."""
    pass

class LabelIndexUnavailableError(GmlError):
    """Raised when labels are resolved before the mailbox's label index was fetched."""
    pass
