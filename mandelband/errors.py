"""Errors raised while validating a render request."""


class RenderError(ValueError):
    """Base class for parameter problems detected before any pixel work."""


class InvalidDimensions(RenderError):
    """The image width or height is not a positive integer."""


class InvalidViewport(RenderError):
    """The viewport corners are not finite or not in screen orientation."""
