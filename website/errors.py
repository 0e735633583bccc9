"""
Exception types raised by the website backend.
"""


class WebsiteError(Exception):
    """Base class for all website backend errors."""


class SnapshotLoadError(WebsiteError):
    """Raised when the article snapshot cannot be read at startup."""


class SnapshotWriteError(WebsiteError):
    """Raised when the article snapshot cannot be written to storage."""


class IdSpaceExhaustedError(WebsiteError):
    """Raised when the sequential allocator has no identifier left to hand out."""


class InvalidImageNameError(WebsiteError):
    """Raised when an uploaded image name cannot be stored safely."""
