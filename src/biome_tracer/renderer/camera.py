"""Orbiting look-at camera."""

from __future__ import annotations

import math

from .vector import Vec3

PITCH_LIMIT = math.pi / 2.0 - 0.1


class CameraError(ValueError):
    """Raised when eye, center and up do not span a usable view basis."""


class Camera:
    """Look-at camera that orbits and zooms around its center.

    The orthonormal basis is recomputed eagerly on every change, so
    :meth:`base_change` always reflects the latest ``orbit``/``zoom`` call.
    """

    def __init__(self, eye: Vec3, center: Vec3, up: Vec3, *, min_distance: float = 0.5) -> None:
        if min_distance <= 0.0:
            raise CameraError("min_distance must be positive")
        self._eye = eye
        self._center = center
        self._up = up
        self.min_distance = min_distance
        self._forward = Vec3(0.0, 0.0, -1.0)
        self._right = Vec3(1.0, 0.0, 0.0)
        self._true_up = Vec3(0.0, 1.0, 0.0)
        self._update_basis()

    @property
    def eye(self) -> Vec3:
        return self._eye

    @property
    def center(self) -> Vec3:
        return self._center

    @property
    def up(self) -> Vec3:
        return self._up

    @property
    def forward(self) -> Vec3:
        return self._forward

    @property
    def right(self) -> Vec3:
        return self._right

    @property
    def true_up(self) -> Vec3:
        return self._true_up

    @property
    def distance(self) -> float:
        return (self._eye - self._center).length()

    def _update_basis(self) -> None:
        view = self._center - self._eye
        if view.length_squared() <= 1e-12:
            raise CameraError("Camera eye and center must not coincide")
        forward = view.normalized()
        right = forward.cross(self._up)
        if right.length_squared() <= 1e-12:
            raise CameraError("Camera up vector is parallel to the view direction")
        right = right.normalized()
        self._forward = forward
        self._right = right
        self._true_up = right.cross(forward).normalized()

    def base_change(self, vector: Vec3) -> Vec3:
        """Map a camera-space direction (x right, y up, -z forward) to world space."""

        return (
            self._right * vector.x
            + self._true_up * vector.y
            - self._forward * vector.z
        )

    def orbit(self, delta_yaw: float, delta_pitch: float) -> None:
        radius_vector = self._eye - self._center
        radius = radius_vector.length()

        current_yaw = math.atan2(radius_vector.z, radius_vector.x)
        radius_xz = math.hypot(radius_vector.x, radius_vector.z)
        current_pitch = math.atan2(-radius_vector.y, radius_xz)

        new_yaw = (current_yaw + delta_yaw) % math.tau
        new_pitch = max(-PITCH_LIMIT, min(PITCH_LIMIT, current_pitch + delta_pitch))

        self._eye = self._center + Vec3(
            radius * math.cos(new_yaw) * math.cos(new_pitch),
            -radius * math.sin(new_pitch),
            radius * math.sin(new_yaw) * math.cos(new_pitch),
        )
        self._update_basis()

    def zoom(self, delta: float) -> None:
        """Move towards the center by ``delta`` (negative moves away)."""

        distance = self.distance
        direction = (self._center - self._eye).normalized()
        new_distance = max(self.min_distance, distance - delta)
        self._eye = self._center - direction * new_distance
        self._update_basis()
