"""Exception types raised by the pattern engine.

Every error is raised before any state is touched, so callers can catch it
and carry on with the previous grid intact.
"""


class PixelcraftError(Exception):
    """Base class for all engine errors."""


class InvalidDimension(PixelcraftError, ValueError):
    """A grid width or height outside [1, 100], or not an integer."""


class MalformedDocument(PixelcraftError, ValueError):
    """An imported document is missing required fields or is inconsistent."""


class InvalidPalette(PixelcraftError, ValueError):
    """Quantization was requested against an empty palette."""


class InvalidColour(PixelcraftError, ValueError):
    """A colour string that is not #rgb / #rrggbb hex."""


class ImageDecodeError(PixelcraftError, ValueError):
    """Image bytes could not be decoded."""
