"""
Exception hierarchy for PhotoEdit.

Only caller mistakes and collaborator failures raise; operator failures
inside the pipeline are recovered locally and never surface here.
"""


class PhotoEditError(Exception):
    """Base exception for PhotoEdit operations."""
    pass


class UnknownParameterError(PhotoEditError, KeyError):
    """Raised when an adjustment name does not exist."""
    pass


class UnknownFilterError(PhotoEditError, ValueError):
    """Raised when a look filter name cannot be resolved."""
    pass


class ImageSourceError(PhotoEditError):
    """Raised when an image source cannot decode the selected photo."""
    pass


class RenderError(PhotoEditError):
    """Raised when a result image cannot be rendered or written."""
    pass
