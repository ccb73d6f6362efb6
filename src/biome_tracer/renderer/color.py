"""RGB colour arithmetic in 8-bit channel range."""

from __future__ import annotations

from dataclasses import dataclass


def _saturate(channel: float) -> int:
    return int(max(0.0, min(255.0, channel)))


@dataclass(frozen=True, slots=True)
class Color:
    """RGB triple stored as floats so blends can exceed the displayable range.

    Channels are only saturated to ``[0, 255]`` when packed with :meth:`to_hex`,
    which lets lighting accumulate contributions from several lights first.
    """

    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: int) -> "Color":
        return cls(float((value >> 16) & 0xFF), float((value >> 8) & 0xFF), float(value & 0xFF))

    @classmethod
    def black(cls) -> "Color":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> "Color":
        return cls(255.0, 255.0, 255.0)

    def __add__(self, other: "Color") -> "Color":
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, factor: float) -> "Color":
        if not isinstance(factor, (int, float)):
            raise TypeError("Color can only be multiplied by a scalar")
        return Color(self.r * factor, self.g * factor, self.b * factor)

    def __rmul__(self, factor: float) -> "Color":
        return self.__mul__(factor)

    def scale(self, factor: float) -> "Color":
        return self * factor

    def lerp(self, other: "Color", t: float) -> "Color":
        """Blend towards ``other``; ``t`` is clamped to ``[0, 1]``."""

        if t <= 0.0:
            return self
        if t >= 1.0:
            return other
        return Color(
            self.r + (other.r - self.r) * t,
            self.g + (other.g - self.g) * t,
            self.b + (other.b - self.b) * t,
        )

    def clamped(self) -> "Color":
        return Color(
            max(0.0, min(255.0, self.r)),
            max(0.0, min(255.0, self.g)),
            max(0.0, min(255.0, self.b)),
        )

    def luminance(self) -> float:
        return 0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b

    def to_hex(self) -> int:
        return (_saturate(self.r) << 16) | (_saturate(self.g) << 8) | _saturate(self.b)

