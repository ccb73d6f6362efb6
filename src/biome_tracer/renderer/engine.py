"""Per-pixel ray casting and frame composition."""

from __future__ import annotations

import asyncio
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .camera import Camera
from .color import Color
from .cube import Cube, Intersect
from .framebuffer import Framebuffer
from .light import Light, calculate_lighting, fresnel_effect
from .vector import Vec3

DAY_SKY = Color(63.0, 96.0, 188.0)
NIGHT_SKY = Color(10.0, 10.0, 30.0)


@dataclass(frozen=True)
class Scene:
    """Solid objects plus the enclosing skybox shell."""

    objects: Tuple[Cube, ...]
    skybox: Tuple[Cube, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "skybox", tuple(self.skybox))


class RenderEngine:
    """Software ray tracer writing packed colours into a :class:`Framebuffer`."""

    def __init__(
        self,
        *,
        fov: float = math.pi / 3.0,
        pixel_aspect: float = 1.0,
        sampling_step: int = 1,
        day_sky: Color = DAY_SKY,
        night_sky: Color = NIGHT_SKY,
        async_chunk_rows: int = 16,
    ) -> None:
        if not 0.0 < fov < math.pi:
            raise ValueError("RenderEngine fov must lie strictly between 0 and pi")
        if pixel_aspect <= 0.0:
            raise ValueError("RenderEngine pixel_aspect must be positive")
        self._fov = fov
        self._tan_half_fov = math.tan(fov / 2.0)
        self._pixel_aspect = pixel_aspect
        self._sampling_step = max(1, int(sampling_step))
        self.day_sky = day_sky
        self.night_sky = night_sky
        self._async_chunk_rows = max(1, int(async_chunk_rows))
        self._ray_cache: Optional[List[List[Vec3]]] = None
        self._ray_cache_key: Optional[Tuple[int, int, float, float]] = None

    @property
    def fov(self) -> float:
        return self._fov

    def set_fov(self, fov: float) -> None:
        if not 0.0 < fov < math.pi:
            raise ValueError("RenderEngine fov must lie strictly between 0 and pi")
        self._fov = fov
        self._tan_half_fov = math.tan(fov / 2.0)
        self._invalidate_ray_cache()

    def set_pixel_aspect(self, pixel_aspect: float) -> None:
        if pixel_aspect <= 0.0:
            raise ValueError("RenderEngine pixel_aspect must be positive")
        self._pixel_aspect = pixel_aspect
        self._invalidate_ray_cache()

    def set_sampling_step(self, step: int) -> None:
        self._sampling_step = max(1, int(step))

    # Ray casting ------------------------------------------------------

    def cast_ray(
        self,
        origin: Vec3,
        direction: Vec3,
        objects: Sequence[Cube],
        skybox: Sequence[Cube],
        lights: Sequence[Light],
        camera: Camera,
        is_night: bool = False,
    ) -> Color:
        closest = Intersect.empty()
        zbuffer = math.inf

        for obj in objects:
            hit = obj.ray_intersect(origin, direction)
            if hit and hit.distance < zbuffer:
                zbuffer = hit.distance
                closest = hit

        if not closest:
            for face in skybox:
                hit = face.ray_intersect(origin, direction)
                if hit:
                    return hit.material.diffuse
            return self.night_sky if is_night else self.day_sky

        point = closest.point
        normal = closest.normal
        material = closest.material
        view_dir = (camera.eye - point).normalized()

        lit = calculate_lighting(point, normal, view_dir, material, lights, objects)

        fresnel = fresnel_effect(normal, view_dir, material.reflectivity)
        return lit.lerp(material.fresnel_color, fresnel * material.reflectivity)

    # Frame rendering --------------------------------------------------

    def render(
        self,
        framebuffer: Framebuffer,
        scene: Scene,
        camera: Camera,
        lights: Sequence[Light],
        *,
        is_night: bool = False,
    ) -> Framebuffer:
        ray_cache = self._ensure_ray_cache(framebuffer.width, framebuffer.height)
        y_start, rows = self._compute_chunk(
            ray_cache, scene, camera, tuple(lights), is_night, 0, framebuffer.height
        )
        self._write_rows(framebuffer, y_start, rows)
        return framebuffer

    async def render_async(
        self,
        framebuffer: Framebuffer,
        scene: Scene,
        camera: Camera,
        lights: Sequence[Light],
        *,
        is_night: bool = False,
        executor: ThreadPoolExecutor | None = None,
        chunk_rows: int | None = None,
    ) -> Framebuffer:
        height = framebuffer.height
        ray_cache = self._ensure_ray_cache(framebuffer.width, height)
        lights = tuple(lights)
        chunk_size = chunk_rows if chunk_rows is not None else self._async_chunk_rows
        # chunks must start on a sampling block boundary
        step = self._sampling_step
        chunk_size = max(step, int(chunk_size) - int(chunk_size) % step)

        loop = asyncio.get_running_loop()
        local_executor = executor
        created_executor = False
        if local_executor is None:
            local_executor = ThreadPoolExecutor(max_workers=4)
            created_executor = True

        try:
            tasks = [
                loop.run_in_executor(
                    local_executor,
                    self._compute_chunk,
                    ray_cache,
                    scene,
                    camera,
                    lights,
                    is_night,
                    y_start,
                    min(height, y_start + chunk_size),
                )
                for y_start in range(0, height, chunk_size)
            ]
            results = await asyncio.gather(*tasks)
        finally:
            if created_executor:
                local_executor.shutdown(wait=True)

        for y_start, rows in results:
            self._write_rows(framebuffer, y_start, rows)
        return framebuffer

    # Internal helpers -------------------------------------------------

    def _ensure_ray_cache(self, width: int, height: int) -> List[List[Vec3]]:
        key = (width, height, self._tan_half_fov, self._pixel_aspect)
        if self._ray_cache is not None and self._ray_cache_key == key:
            return self._ray_cache

        aspect = (width / height) * self._pixel_aspect
        tan_half_fov = self._tan_half_fov
        rays: List[List[Vec3]] = []

        for y in range(height):
            sy = (1.0 - ((y + 0.5) / height) * 2.0) * tan_half_fov
            row: List[Vec3] = []
            for x in range(width):
                sx = (((x + 0.5) / width) * 2.0 - 1.0) * aspect * tan_half_fov
                row.append(Vec3(sx, sy, -1.0).normalized())
            rays.append(row)

        self._ray_cache = rays
        self._ray_cache_key = key
        return rays

    def _invalidate_ray_cache(self) -> None:
        self._ray_cache = None
        self._ray_cache_key = None

    def _compute_chunk(
        self,
        ray_cache: Sequence[Sequence[Vec3]],
        scene: Scene,
        camera: Camera,
        lights: Sequence[Light],
        is_night: bool,
        y_start: int,
        y_end: int,
    ) -> Tuple[int, List[List[int]]]:
        sampling_step = self._sampling_step
        cast_ray = self.cast_ray
        base_change = camera.base_change
        origin = camera.eye
        objects = scene.objects
        skybox = scene.skybox

        chunk_height = max(0, y_end - y_start)
        width = len(ray_cache[0]) if ray_cache else 0
        chunk: List[List[int]] = [[0] * width for _ in range(chunk_height)]

        for y in range(y_start, y_end, sampling_step):
            ray_row = ray_cache[y]
            for x in range(0, width, sampling_step):
                direction = base_change(ray_row[x])
                packed = cast_ray(origin, direction, objects, skybox, lights, camera, is_night).to_hex()

                block_y_end = min(y_end, y + sampling_step)
                block_x_end = min(width, x + sampling_step)
                for yy in range(y, block_y_end):
                    local_row = chunk[yy - y_start]
                    for xx in range(x, block_x_end):
                        local_row[xx] = packed

        return y_start, chunk

    @staticmethod
    def _write_rows(framebuffer: Framebuffer, y_start: int, rows: Sequence[Sequence[int]]) -> None:
        for offset, row in enumerate(rows):
            framebuffer.write_row(y_start + offset, row)
