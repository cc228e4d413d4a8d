"""Colour parsing and perceptual nearest-colour matching.

Colours are canonical lowercase '#rrggbb' strings. Matching converts both the
sample and every palette entry from sRGB to CIE L*a*b* (D65 white point) and
picks the entry with the smallest Euclidean distance in Lab. Plain RGB
distance picks visually wrong neighbours, particularly in dark and saturated
regions.

Ties go to the first palette entry achieving the minimum (np.argmin order).
"""

import math
import re

import numpy as np

from pixelcraft.core.errors import InvalidColour, InvalidPalette

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

# sRGB -> XYZ (D65)
_RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
_WHITE_D65 = np.array([0.95047, 1.0, 1.08883])
_EPSILON = 0.008856
_KAPPA = 903.3


def normalize_colour(value: str) -> str:
    """Return the canonical '#rrggbb' form of a hex colour. Raises InvalidColour."""
    if not isinstance(value, str):
        raise InvalidColour(f'Colour must be a string, got {type(value).__name__}')
    m = _HEX_RE.match(value.strip())
    if not m:
        raise InvalidColour(f'Not a hex colour: {value!r}')
    digits = m.group(1).lower()
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    return f'#{digits}'


def is_colour(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _HEX_RE.match(value.strip()) is not None


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    colour = normalize_colour(value)
    return (int(colour[1:3], 16), int(colour[3:5], 16), int(colour[5:7], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f'#{int(r):02x}{int(g):02x}{int(b):02x}'


def rgb_distance(a: tuple[int, int, int], b: tuple[int, int, int]) -> float:
    """Euclidean distance in RGB. Python ints, so no uint8 wrap-around."""
    return math.sqrt(sum((int(x) - int(y)) ** 2 for x, y in zip(a, b)))


def rgb_to_lab(rgb) -> np.ndarray:
    """Convert sRGB (0-255) to CIE L*a*b*.

    Accepts a single triplet or an (N, 3) array; returns float64 of the same
    leading shape.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    single = arr.ndim == 1
    arr = arr.reshape(-1, 3) / 255.0

    linear = np.where(arr > 0.04045, ((arr + 0.055) / 1.055) ** 2.4, arr / 12.92)
    xyz = linear @ _RGB_TO_XYZ.T / _WHITE_D65

    f = np.where(xyz > _EPSILON, np.cbrt(xyz), (_KAPPA * xyz + 16.0) / 116.0)
    fx, fy, fz = f[:, 0], f[:, 1], f[:, 2]

    lab = np.column_stack([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)])
    return lab[0] if single else lab


def lab_distance(a, b) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def palette_lab(palette: list[str]) -> np.ndarray:
    """Lab coordinates for every palette entry, shape (P, 3)."""
    if not palette:
        raise InvalidPalette('Cannot quantize against an empty palette')
    return rgb_to_lab([hex_to_rgb(c) for c in palette])


def quantize_pixels(pixels, palette: list[str]) -> np.ndarray:
    """Map an (N, 3) RGB array to palette indices, shape (N,)."""
    pal = palette_lab(palette)
    samples = rgb_to_lab(np.asarray(pixels).reshape(-1, 3))
    distances = np.linalg.norm(samples[:, None, :] - pal[None, :, :], axis=-1)
    return np.argmin(distances, axis=1)


def nearest_colour(rgb: tuple[int, int, int], palette: list[str]) -> tuple[str, float]:
    """Return (palette colour, Lab distance) closest to rgb."""
    pal = palette_lab(palette)
    sample = rgb_to_lab(rgb)
    distances = np.linalg.norm(pal - sample, axis=-1)
    idx = int(np.argmin(distances))
    return palette[idx], float(distances[idx])
