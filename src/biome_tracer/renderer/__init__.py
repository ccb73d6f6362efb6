"""Voxel ray-tracing renderer."""

from .camera import Camera, CameraError
from .color import Color
from .cube import Cube, Intersect
from .daylight import DayNightCycle
from .engine import RenderEngine, Scene
from .framebuffer import Framebuffer
from .light import Light, calculate_lighting, cast_shadow, fresnel_effect, reflect
from .material import Material
from .objects import (
    TextureSet,
    build_biome_scene,
    create_skybox,
    create_voxelized_cube,
    load_texture_set,
)
from .texture import Texture
from .vector import Vec3

__all__ = [
    "Camera",
    "CameraError",
    "Color",
    "Cube",
    "DayNightCycle",
    "Framebuffer",
    "Intersect",
    "Light",
    "Material",
    "RenderEngine",
    "Scene",
    "Texture",
    "TextureSet",
    "Vec3",
    "build_biome_scene",
    "calculate_lighting",
    "cast_shadow",
    "create_skybox",
    "create_voxelized_cube",
    "fresnel_effect",
    "load_texture_set",
    "reflect",
]
