"""Surface material shared by every cube of a block type."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from .color import Color


@dataclass(frozen=True, slots=True)
class Material:
    """Shading parameters of a primitive.

    ``albedo`` splits the response into diffuse and specular weights,
    ``specular`` is the Phong exponent and ``reflectivity`` doubles as the
    Fresnel base reflectance. ``transparency`` is carried but not shaded.
    """

    albedo: Tuple[float, float]
    specular: float
    transparency: float
    reflectivity: float
    diffuse: Color
    fresnel_color: Color

    def with_diffuse(self, color: Color) -> "Material":
        return replace(self, diffuse=color)
