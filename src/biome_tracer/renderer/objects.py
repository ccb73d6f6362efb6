"""Material presets and builders for the voxel biome and its skybox."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .color import Color
from .cube import Cube
from .engine import Scene
from .material import Material
from .texture import Texture
from .vector import Vec3

GRASS = Material((0.9, 0.3), 0.05, 0.0, 0.1, Color(34, 139, 34), Color(255, 255, 255))
WOOD = Material((0.6, 0.2), 0.1, 0.0, 0.2, Color(160, 82, 45), Color(200, 200, 200))
LEAVES = Material((0.5, 0.1), 0.1, 0.0, 0.1, Color(255, 182, 193), Color(255, 200, 220))
WATER = Material((0.4, 0.3), 0.8, 0.7, 0.5, Color(0, 0, 255), Color(63, 96, 188))
GLOWSTONE = Material((1.0, 0.9), 0.3, 0.0, 0.5, Color(255, 215, 0), Color(255, 255, 200))
SKYBOX = Material((1.0, 0.0), 0.0, 0.0, 0.0, Color(255, 255, 255), Color(255, 255, 255))

DEFAULT_VOXEL_SIZE = 3.75
SKYBOX_SIZE = 100.0
SKYBOX_THICKNESS = 0.01

# file name and the colour used when the file cannot be found
TEXTURE_FILES: Dict[str, Tuple[str, Color]] = {
    "sky": ("sky.jpg", Color(135, 190, 235)),
    "sky_top": ("sky2.png", Color(110, 160, 225)),
    "grass_top": ("grass_top.png", GRASS.diffuse),
    "grass_side": ("grass_side.png", Color(120, 110, 60)),
    "dirt": ("dirt.png", Color(121, 85, 58)),
    "wood": ("cherrylog.png", WOOD.diffuse),
    "woodplank": ("woodplank.webp", Color(190, 140, 95)),
    "leaves": ("cherryblossom.jpg", LEAVES.diffuse),
    "water": ("water.webp", WATER.diffuse),
    "glowstone": ("glowstone.webp", GLOWSTONE.diffuse),
}


@dataclass(frozen=True)
class TextureSet:
    """Shared texture handles for every block type in the biome."""

    textures: Dict[str, Texture]
    warnings: Tuple[str, ...] = ()

    def __getitem__(self, name: str) -> Texture:
        return self.textures[name]

    @classmethod
    def solid(cls) -> "TextureSet":
        return cls({name: Texture.solid(color) for name, (_, color) in TEXTURE_FILES.items()})


def load_texture_set(texture_dir: Union[str, Path]) -> TextureSet:
    """Load the biome textures, substituting flat colours for missing files."""

    directory = Path(texture_dir)
    textures: Dict[str, Texture] = {}
    warnings: List[str] = []
    for name, (filename, fallback) in TEXTURE_FILES.items():
        path = directory / filename
        if not path.is_file():
            textures[name] = Texture.solid(fallback)
            warnings.append(f"Texture '{path}' not found; using a flat colour")
            continue
        try:
            textures[name] = Texture.from_file(path)
        except OSError as exc:
            textures[name] = Texture.solid(fallback)
            warnings.append(f"Texture '{path}' could not be decoded ({exc}); using a flat colour")
    return TextureSet(textures, tuple(warnings))


def create_voxelized_cube(
    min_corner: Vec3,
    max_corner: Vec3,
    top_texture: Texture,
    side_texture: Texture,
    bottom_texture: Texture,
    material: Material,
    voxel_size: float,
) -> List[Cube]:
    """Fill the box ``min_corner``-``max_corner`` with cubes of at most ``voxel_size``."""

    if voxel_size <= 0.0:
        raise ValueError("voxel_size must be positive")

    x_steps = math.ceil((max_corner.x - min_corner.x) / voxel_size)
    y_steps = math.ceil((max_corner.y - min_corner.y) / voxel_size)
    z_steps = math.ceil((max_corner.z - min_corner.z) / voxel_size)

    cubes: List[Cube] = []
    for i in range(x_steps):
        for j in range(y_steps):
            for k in range(z_steps):
                cube_min = Vec3(
                    min_corner.x + i * voxel_size,
                    min_corner.y + j * voxel_size,
                    min_corner.z + k * voxel_size,
                )
                cube_max = Vec3(
                    min(cube_min.x + voxel_size, max_corner.x),
                    min(cube_min.y + voxel_size, max_corner.y),
                    min(cube_min.z + voxel_size, max_corner.z),
                )
                cubes.append(Cube(cube_min, cube_max, material, top_texture, side_texture, bottom_texture))
    return cubes


def create_skybox(
    front: Texture,
    back: Texture,
    left: Texture,
    right: Texture,
    top: Texture,
    bottom: Texture,
    size: float = SKYBOX_SIZE,
) -> List[Cube]:
    """Return six thin slabs enclosing a cube of edge ``size`` around the origin."""

    half = size / 2.0
    t = SKYBOX_THICKNESS

    def slab(low: Vec3, high: Vec3, texture: Texture) -> Cube:
        return Cube(low, high, SKYBOX, texture, texture, texture)

    return [
        slab(Vec3(-half, -half, half), Vec3(half, half, half + t), front),
        slab(Vec3(-half, -half, -half - t), Vec3(half, half, -half), back),
        slab(Vec3(-half - t, -half, -half), Vec3(-half, half, half), left),
        slab(Vec3(half, -half, -half), Vec3(half + t, half, half), right),
        slab(Vec3(-half, half, -half), Vec3(half, half + t, half), top),
        slab(Vec3(-half, -half - t, -half), Vec3(half, -half, half), bottom),
    ]


def build_biome_scene(textures: TextureSet, voxel_size: float = DEFAULT_VOXEL_SIZE) -> Scene:
    """Lay out the cherry-blossom biome: banks, river, hill, two trees, bridge and lamp post."""

    grass, grass_side, dirt = textures["grass_top"], textures["grass_side"], textures["dirt"]
    wood, plank = textures["wood"], textures["woodplank"]
    leaves, water, glowstone = textures["leaves"], textures["water"], textures["glowstone"]

    def ground(low: Vec3, high: Vec3) -> List[Cube]:
        return create_voxelized_cube(low, high, grass, grass_side, dirt, GRASS, voxel_size)

    def block(low: Vec3, high: Vec3, texture: Texture, material: Material) -> List[Cube]:
        return create_voxelized_cube(low, high, texture, texture, texture, material, voxel_size)

    objects: List[Cube] = []
    # river banks and the bed under the river
    objects += ground(Vec3(-10.0, -5.5, -10.0), Vec3(-2.0, 0.0, 10.0))
    objects += ground(Vec3(-2.0, -5.5, -10.0), Vec3(2.0, -2.75, 10.0))
    objects += ground(Vec3(2.0, -5.5, -10.0), Vec3(10.0, 0.0, 10.0))
    objects += block(Vec3(-2.0, -3.0, -10.0), Vec3(2.0, -0.5, 10.0), water, WATER)
    # hill
    objects += ground(Vec3(-10.0, 0.0, -10.0), Vec3(-3.0, 3.0, -2.0))
    # first tree
    objects += block(Vec3(-7.5, -1.0, -7.5), Vec3(-5.5, 7.0, -5.5), wood, WOOD)
    objects += block(Vec3(-9.5, 7.0, -9.5), Vec3(-3.5, 9.75, -3.5), leaves, LEAVES)
    objects += block(Vec3(-8.5, 9.75, -8.5), Vec3(-4.5, 12.5, -4.5), leaves, LEAVES)
    # second tree
    objects += block(Vec3(6.5, -1.0, 6.5), Vec3(8.5, 5.0, 8.5), wood, WOOD)
    objects += block(Vec3(4.5, 5.0, 4.5), Vec3(10.5, 7.75, 10.5), leaves, LEAVES)
    objects += block(Vec3(5.5, 7.75, 5.5), Vec3(9.5, 10.5, 9.5), leaves, LEAVES)
    # bridge, lamp post and glowstone
    objects += block(Vec3(-5.0, 0.0, 1.0), Vec3(5.0, 1.0, 3.0), plank, WOOD)
    objects += block(Vec3(6.5, 0.0, -8.0), Vec3(7.0, 5.0, -7.0), wood, WOOD)
    objects += block(Vec3(5.5, 5.0, -8.5), Vec3(8.5, 7.75, -5.75), glowstone, GLOWSTONE)

    sky, sky_top = textures["sky"], textures["sky_top"]
    skybox = create_skybox(sky_top, sky, sky, sky, sky_top, sky, SKYBOX_SIZE)
    return Scene(tuple(objects), tuple(skybox))
