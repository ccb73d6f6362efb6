"""Axis-aligned cube primitive and ray/box intersection."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .color import Color
from .material import Material
from .texture import Texture
from .vector import Vec3

EPSILON = 1e-4


@dataclass(frozen=True, slots=True)
class Intersect:
    """Result of a ray test.

    A miss is represented by :meth:`empty`, which is falsy and carries no
    point, normal or material, so it cannot be mistaken for a hit.
    """

    is_intersecting: bool
    point: Optional[Vec3]
    normal: Optional[Vec3]
    distance: float
    material: Optional[Material]

    @classmethod
    def hit(cls, point: Vec3, normal: Vec3, distance: float, material: Material) -> "Intersect":
        return cls(True, point, normal, distance, material)

    @classmethod
    def empty(cls) -> "Intersect":
        return _EMPTY

    def __bool__(self) -> bool:
        return self.is_intersecting


_EMPTY = Intersect(False, None, None, math.inf, None)


def _slab(origin: float, direction: float, low: float, high: float) -> Optional[Tuple[float, float]]:
    # Division by zero raises in Python, so parallel rays are resolved here:
    # outside the slab they can never enter it, inside it they are unconstrained.
    if direction == 0.0:
        if origin < low or origin > high:
            return None
        return (-math.inf, math.inf)

    t0 = (low - origin) / direction
    t1 = (high - origin) / direction
    if t0 > t1:
        t0, t1 = t1, t0
    return (t0, t1)


def _ratio(value: float, low: float, high: float) -> float:
    extent = high - low
    if extent == 0.0:
        return 0.0
    return (value - low) / extent


@dataclass(frozen=True, slots=True)
class Cube:
    """Axis-aligned box with top, side and bottom textures.

    Textures are held by reference; cubes produced by the scene builders
    share a handful of ``Texture`` instances between them.
    """

    min: Vec3
    max: Vec3
    material: Material
    top_texture: Texture
    side_texture: Texture
    bottom_texture: Texture

    def __post_init__(self) -> None:
        if self.min.x > self.max.x or self.min.y > self.max.y or self.min.z > self.max.z:
            raise ValueError(f"Cube min {self.min} must not exceed max {self.max}")

    def ray_intersect(self, origin: Vec3, direction: Vec3) -> Intersect:
        t_enter = -math.inf
        t_exit = math.inf

        for o, d, low, high in zip(origin, direction, self.min, self.max):
            interval = _slab(o, d, low, high)
            if interval is None:
                return Intersect.empty()
            t_enter = max(t_enter, interval[0])
            t_exit = min(t_exit, interval[1])
            if t_enter > t_exit:
                return Intersect.empty()

        if t_enter < 0.0:
            return Intersect.empty()

        point = origin + direction * t_enter
        material = self.material.with_diffuse(self.surface_color(point))
        return Intersect.hit(point, self.calculate_normal(point), t_enter, material)

    def surface_color(self, point: Vec3) -> Color:
        """Sample the texture of the face ``point`` lies on."""

        low, high = self.min, self.max
        if abs(point.y - high.y) < EPSILON:
            u = _ratio(point.x, low.x, high.x)
            v = _ratio(point.z, low.z, high.z)
            return self.top_texture.sample(u, v)
        if abs(point.y - low.y) < EPSILON:
            u = _ratio(point.x, low.x, high.x)
            v = _ratio(point.z, low.z, high.z)
            return self.bottom_texture.sample(u, v)
        if abs(point.x - low.x) < EPSILON or abs(point.x - high.x) < EPSILON:
            u = _ratio(point.z, low.z, high.z)
            v = _ratio(point.y, low.y, high.y)
            return self.side_texture.sample(u, v)
        # front and back faces reuse the side texture
        u = _ratio(point.x, low.x, high.x)
        v = _ratio(point.y, low.y, high.y)
        return self.side_texture.sample(u, v)

    def calculate_normal(self, point: Vec3) -> Vec3:
        if abs(point.x - self.min.x) < EPSILON:
            return Vec3(-1.0, 0.0, 0.0)
        if abs(point.x - self.max.x) < EPSILON:
            return Vec3(1.0, 0.0, 0.0)
        if abs(point.y - self.min.y) < EPSILON:
            return Vec3(0.0, -1.0, 0.0)
        if abs(point.y - self.max.y) < EPSILON:
            return Vec3(0.0, 1.0, 0.0)
        if abs(point.z - self.min.z) < EPSILON:
            return Vec3(0.0, 0.0, -1.0)
        return Vec3(0.0, 0.0, 1.0)
