class KeepsakeError(Exception):
    """Base class for all keepsake errors."""


class ImproperlyConfigured(KeepsakeError):
    """Raised when cookie persistence is configured in a way the transport cannot honor."""
