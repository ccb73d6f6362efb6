"""Day/night cycle driving the biome's lights between frames."""

from __future__ import annotations

import math
from typing import List

from .color import Color
from .light import Light
from .vector import Vec3

SUN_COLOR = Color(255, 255, 224)
MOON_COLOR = Color(135, 206, 235)
GLOWSTONE_COLOR = Color(255, 223, 0)
GLOWSTONE_POSITION = Vec3(7.0, 6.375, -7.125)


class DayNightCycle:
    """Clock that moves the sun and moon along a fixed arc.

    The sun is up while the angle is in ``[0, pi)``; at night the moon takes
    its place on the opposite side and the glowstone lamp switches on.
    """

    def __init__(self, time: float = 0.0, step: float = 0.1) -> None:
        self.time = time
        self.step = step

    def advance(self, steps: int = 1) -> None:
        self.time += self.step * steps

    @property
    def sun_angle(self) -> float:
        return self.time % math.tau

    @property
    def is_night(self) -> bool:
        return self.sun_angle >= math.pi

    @staticmethod
    def _orbit_position(angle: float) -> Vec3:
        return Vec3(15.0 * math.cos(angle), 25.0 * math.sin(angle), 15.0)

    def lights(self) -> List[Light]:
        angle = self.sun_angle
        if not self.is_night:
            return [Light(self._orbit_position(angle), SUN_COLOR, 1.0)]

        moon_angle = (angle + math.pi) % math.tau
        return [
            Light(self._orbit_position(moon_angle), MOON_COLOR, 0.5),
            Light(GLOWSTONE_POSITION, GLOWSTONE_COLOR, 0.01),
        ]
