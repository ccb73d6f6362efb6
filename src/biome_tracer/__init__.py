"""Interactive ray tracer for a voxel cherry-blossom biome."""

__version__ = "0.1.0"
