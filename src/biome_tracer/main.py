"""Interactive entry point for the voxel biome ray tracer."""

from __future__ import annotations

import argparse
import asyncio
import math
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .renderer.camera import Camera, CameraError
from .renderer.daylight import DayNightCycle
from .renderer.engine import RenderEngine, Scene
from .renderer.framebuffer import Framebuffer
from .renderer.objects import DEFAULT_VOXEL_SIZE, build_biome_scene, load_texture_set
from .renderer.terminal import TerminalController
from .renderer.vector import Vec3

ORBIT_STEP = math.pi / 10.0
ZOOM_STEP = 1.0
TERMINAL_PIXEL_ASPECT = 0.5
SNAPSHOT_SIZE = (600, 450)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ray-traced voxel biome for your terminal")
    parser.add_argument("--fps", type=float, default=10.0, help="Target frames per second (default: 10)")
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Run for a fixed number of frames (0 = infinite)",
    )
    parser.add_argument("--width", type=int, default=None, help="Framebuffer width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Framebuffer height in pixels")
    parser.add_argument("--fov", type=float, default=60.0, help="Field of view in degrees (default: 60)")
    parser.add_argument(
        "--textures",
        type=str,
        default="textures",
        help="Directory holding the block and sky textures",
    )
    parser.add_argument(
        "--voxel-size",
        type=float,
        default=DEFAULT_VOXEL_SIZE,
        help=f"Edge length of a voxel block (default: {DEFAULT_VOXEL_SIZE})",
    )
    parser.add_argument("--time", type=float, default=0.0, help="Initial day/night clock value")
    parser.add_argument(
        "--time-step",
        type=float,
        default=0.1,
        help="Clock advance per frame; 0 freezes the sun (default: 0.1)",
    )
    parser.add_argument(
        "--eye",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=(0.0, 5.0, 35.0),
        help="Initial camera position",
    )
    parser.add_argument(
        "--pixel-step",
        type=int,
        default=1,
        help="Trace every Nth pixel and fill the block around it (default: 1)",
    )
    parser.add_argument(
        "--async",
        dest="async_mode",
        action="store_true",
        help="Render row chunks concurrently on a thread pool",
    )
    parser.add_argument("--workers", type=int, default=None, help="Thread pool size for --async")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Render a single frame to this PNG file and exit",
    )
    return parser.parse_args(argv)


@dataclass
class RuntimeConfig:
    scene: Scene
    camera: Camera
    cycle: DayNightCycle
    engine: RenderEngine
    warnings: list[str] = field(default_factory=list)
    fps: float = 10.0
    frame_duration: float = 0.1
    width: Optional[int] = None
    height: Optional[int] = None
    async_mode: bool = False
    async_workers: int = 2
    async_chunk_rows: int = 16
    output: Optional[str] = None


def _setup_runtime(args: argparse.Namespace) -> RuntimeConfig:
    textures = load_texture_set(args.textures)
    warnings = list(textures.warnings)

    scene = build_biome_scene(textures, voxel_size=args.voxel_size)
    camera = Camera(Vec3(*args.eye), Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    cycle = DayNightCycle(time=args.time, step=args.time_step)

    fov = math.radians(args.fov)
    pixel_aspect = 1.0 if args.output else TERMINAL_PIXEL_ASPECT
    pixel_step = max(1, args.pixel_step)
    engine = RenderEngine(fov=fov, pixel_aspect=pixel_aspect, sampling_step=pixel_step)

    width = args.width
    height = args.height
    if args.output:
        width = width or SNAPSHOT_SIZE[0]
        height = height or SNAPSHOT_SIZE[1]

    fps = max(1.0, args.fps)
    cpu_count = os.cpu_count() or 2
    async_workers = max(2, args.workers if args.workers else min(cpu_count, 4))
    async_chunk_rows = max(8, pixel_step * 4)
    if args.async_mode and cpu_count < 2:
        warnings.append("Async mode requested on a single-core machine; expect no speed-up")
    if not args.output and not sys.stdin.isatty():
        warnings.append("stdin is not a TTY; keyboard controls are disabled")

    return RuntimeConfig(
        scene=scene,
        camera=camera,
        cycle=cycle,
        engine=engine,
        warnings=warnings,
        fps=fps,
        frame_duration=1.0 / fps,
        width=width,
        height=height,
        async_mode=bool(args.async_mode),
        async_workers=async_workers,
        async_chunk_rows=async_chunk_rows,
        output=args.output,
    )


def _emit_warnings(warnings: Sequence[str]) -> None:
    if not warnings:
        return
    for warning in warnings:
        sys.stderr.write(f"[biome-tracer] {warning}\n")
    sys.stderr.flush()


def apply_keys(camera: Camera, keys: Sequence[str]) -> bool:
    """Apply orbit/zoom key presses to ``camera``; return False when asked to quit."""

    for key in keys:
        if key == "LEFT":
            camera.orbit(ORBIT_STEP, 0.0)
        elif key == "RIGHT":
            camera.orbit(-ORBIT_STEP, 0.0)
        elif key == "UP":
            camera.orbit(0.0, -ORBIT_STEP)
        elif key == "DOWN":
            camera.orbit(0.0, ORBIT_STEP)
        elif key in ("x", "X"):
            camera.zoom(ZOOM_STEP)
        elif key in ("z", "Z"):
            camera.zoom(-ZOOM_STEP)
        elif key in ("q", "Q"):
            return False
    return True


def _frame_buffer_for(config: RuntimeConfig, controller: TerminalController, current: Optional[Framebuffer]) -> Framebuffer:
    columns, rows = controller.frame_size()
    width = config.width or columns
    height = config.height or rows
    if current is not None and current.width == width and current.height == height:
        return current
    return Framebuffer(width, height)


def _hud_line(config: RuntimeConfig, smoothed_fps: float) -> str:
    phase = "night" if config.cycle.is_night else "day"
    return f"FPS {smoothed_fps:4.1f} | {phase} | arrows: orbit  x/z: zoom  q: quit"


def render_snapshot(config: RuntimeConfig) -> Framebuffer:
    framebuffer = Framebuffer(config.width or SNAPSHOT_SIZE[0], config.height or SNAPSHOT_SIZE[1])
    config.engine.render(
        framebuffer,
        config.scene,
        config.camera,
        config.cycle.lights(),
        is_night=config.cycle.is_night,
    )
    return framebuffer


def _run_sync_loop(args: argparse.Namespace, config: RuntimeConfig) -> None:
    controller = TerminalController()
    with controller:
        framebuffer: Optional[Framebuffer] = None
        frame_counter = 0
        last_frame_start: float | None = None
        smoothed_fps = config.fps

        try:
            while True:
                frame_start = time.perf_counter()
                if last_frame_start is not None:
                    instantaneous_fps = 1.0 / max(frame_start - last_frame_start, 1e-6)
                    smoothed_fps = smoothed_fps * 0.85 + instantaneous_fps * 0.15
                last_frame_start = frame_start

                if not apply_keys(config.camera, controller.poll_keys()):
                    break

                framebuffer = _frame_buffer_for(config, controller, framebuffer)
                config.engine.render(
                    framebuffer,
                    config.scene,
                    config.camera,
                    config.cycle.lights(),
                    is_night=config.cycle.is_night,
                )
                controller.draw(framebuffer.to_ansi(), (_hud_line(config, smoothed_fps),))
                config.cycle.advance()

                frame_counter += 1
                if args.frames and frame_counter >= args.frames:
                    break

                sleep_time = config.frame_duration - (time.perf_counter() - frame_start)
                if sleep_time > 0:
                    time.sleep(sleep_time)
        except KeyboardInterrupt:  # pragma: no cover - interactive loop
            controller.restore()
            sys.stdout.write("\nInterrupted. Bye!\n")
            sys.stdout.flush()


async def _run_async_loop(args: argparse.Namespace, config: RuntimeConfig) -> None:
    controller = TerminalController()
    try:
        with controller, ThreadPoolExecutor(max_workers=config.async_workers) as executor:
            framebuffer: Optional[Framebuffer] = None
            frame_counter = 0
            last_frame_start: float | None = None
            smoothed_fps = config.fps

            while True:
                frame_start = time.perf_counter()
                if last_frame_start is not None:
                    instantaneous_fps = 1.0 / max(frame_start - last_frame_start, 1e-6)
                    smoothed_fps = smoothed_fps * 0.85 + instantaneous_fps * 0.15
                last_frame_start = frame_start

                if not apply_keys(config.camera, controller.poll_keys()):
                    break

                framebuffer = _frame_buffer_for(config, controller, framebuffer)
                await config.engine.render_async(
                    framebuffer,
                    config.scene,
                    config.camera,
                    config.cycle.lights(),
                    is_night=config.cycle.is_night,
                    executor=executor,
                    chunk_rows=config.async_chunk_rows,
                )
                controller.draw(framebuffer.to_ansi(), (_hud_line(config, smoothed_fps),))
                config.cycle.advance()

                frame_counter += 1
                if args.frames and frame_counter >= args.frames:
                    break

                sleep_time = config.frame_duration - (time.perf_counter() - frame_start)
                if sleep_time > 0:
                    await asyncio.sleep(sleep_time)
    except (KeyboardInterrupt, asyncio.CancelledError):  # pragma: no cover - interactive loop
        controller.restore()
        sys.stdout.write("\nInterrupted. Bye!\n")
        sys.stdout.flush()


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    try:
        config = _setup_runtime(args)
    except (CameraError, ValueError) as exc:
        sys.stderr.write(f"[biome-tracer] {exc}\n")
        return 2
    _emit_warnings(config.warnings)

    if config.output:
        render_snapshot(config).save(config.output)
        return 0

    if config.async_mode:
        asyncio.run(_run_async_loop(args, config))
    else:
        _run_sync_loop(args, config)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
