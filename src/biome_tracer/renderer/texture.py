"""Read-only colour grids sampled by normalised coordinates."""

from __future__ import annotations

import math
from os import PathLike
from typing import Sequence, Tuple, Union

from PIL import Image

from .color import Color

_WRAP_MODES = ("clamp", "repeat")


class Texture:
    """Immutable 2D grid of colours.

    Instances are meant to be shared: every cube face that uses the same
    image holds a reference to one ``Texture`` rather than a copy of its
    pixels. ``v = 0`` addresses the bottom row of the image so that side
    faces are not drawn upside down.
    """

    __slots__ = ("_width", "_height", "_pixels", "_wrap")

    def __init__(self, width: int, height: int, pixels: Sequence[Color], *, wrap: str = "clamp") -> None:
        if width < 1 or height < 1:
            raise ValueError("Texture requires width and height >= 1")
        if len(pixels) != width * height:
            raise ValueError(f"Texture expects {width * height} pixels, got {len(pixels)}")
        if wrap not in _WRAP_MODES:
            raise ValueError(f"Unsupported wrap mode '{wrap}'")
        self._width = width
        self._height = height
        self._pixels: Tuple[Color, ...] = tuple(pixels)
        self._wrap = wrap

    @classmethod
    def from_pixels(cls, rows: Sequence[Sequence[Color]], *, wrap: str = "clamp") -> "Texture":
        if not rows or not rows[0]:
            raise ValueError("Texture requires at least one pixel")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("Texture rows must all have the same length")
        return cls(width, len(rows), [pixel for row in rows for pixel in row], wrap=wrap)

    @classmethod
    def solid(cls, color: Color) -> "Texture":
        return cls(1, 1, [color])

    @classmethod
    def from_image(cls, image: Image.Image, *, wrap: str = "clamp") -> "Texture":
        rgb = image.convert("RGB")
        width, height = rgb.size
        raw = rgb.tobytes()
        pixels = [
            Color(float(raw[i]), float(raw[i + 1]), float(raw[i + 2]))
            for i in range(0, len(raw), 3)
        ]
        return cls(width, height, pixels, wrap=wrap)

    @classmethod
    def from_file(cls, path: Union[str, PathLike], *, wrap: str = "clamp") -> "Texture":
        with Image.open(path) as image:
            return cls.from_image(image, wrap=wrap)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def wrap(self) -> str:
        return self._wrap

    def sample(self, u: float, v: float) -> Color:
        if not math.isfinite(u):
            u = 0.0
        if not math.isfinite(v):
            v = 0.0
        if self._wrap == "repeat":
            u = u - math.floor(u)
            v = v - math.floor(v)
        else:
            u = max(0.0, min(1.0, u))
            v = max(0.0, min(1.0, v))

        x = min(self._width - 1, int(u * self._width))
        y = min(self._height - 1, int((1.0 - v) * self._height))
        return self._pixels[y * self._width + x]
