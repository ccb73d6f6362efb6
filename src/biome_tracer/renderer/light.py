"""Point lights, shadow feelers and direct lighting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .color import Color
from .cube import Cube
from .material import Material
from .vector import Vec3

SHADOW_BIAS = 1e-4


@dataclass(frozen=True, slots=True)
class Light:
    position: Vec3
    color: Color
    intensity: float


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    return incident - normal * (2.0 * incident.dot(normal))


def cast_shadow(point: Vec3, normal: Vec3, light: Light, objects: Sequence[Cube]) -> float:
    """Return how much of ``light`` is blocked at ``point``, in ``[0, 1]``.

    Only the first occluder found in scene order is considered; its
    attenuation falls off with the square of its relative distance.
    """

    to_light = light.position - point
    light_distance = to_light.length()
    if light_distance <= 0.0:
        return 0.0
    light_dir = to_light / light_distance

    offset = normal * SHADOW_BIAS
    if light_dir.dot(normal) < 0.0:
        origin = point - offset
    else:
        origin = point + offset

    for obj in objects:
        hit = obj.ray_intersect(origin, light_dir)
        if hit and hit.distance < light_distance:
            ratio = hit.distance / light_distance
            return 1.0 - min(ratio * ratio, 1.0)
    return 0.0


def calculate_lighting(
    point: Vec3,
    normal: Vec3,
    view_dir: Vec3,
    material: Material,
    lights: Sequence[Light],
    objects: Sequence[Cube],
) -> Color:
    white = Color.white()
    diffuse_weight, specular_weight = material.albedo
    final_color = Color.black()

    for light in lights:
        shadow = cast_shadow(point, normal, light, objects)
        intensity = light.intensity * (1.0 - shadow)
        light_dir = (light.position - point).normalized()

        diffuse_intensity = max(0.0, normal.dot(light_dir))
        diffuse = material.diffuse.scale(diffuse_intensity * diffuse_weight) * intensity

        reflect_dir = reflect(-light_dir, normal)
        specular_intensity = max(0.0, reflect_dir.dot(view_dir)) ** material.specular
        specular = white.scale(specular_intensity * specular_weight) * intensity

        final_color = final_color + diffuse + specular

    return final_color


def fresnel_effect(normal: Vec3, view_dir: Vec3, f0: float) -> float:
    """Schlick's approximation of the reflectance at the viewing angle."""

    cos_theta = max(0.0, normal.dot(view_dir))
    return f0 + (1.0 - f0) * (1.0 - cos_theta) ** 5
