"""Packed-colour pixel grid with PNG and ANSI output."""

from __future__ import annotations

from os import PathLike
from typing import List, Optional, Sequence, Union

from PIL import Image


def ansi_from_hex(color: int) -> int:
    """Map a packed ``0xRRGGBB`` colour onto the 6x6x6 ANSI colour cube."""

    r = (color >> 16) & 0xFF
    g = (color >> 8) & 0xFF
    b = color & 0xFF
    return 16 + 36 * round(r * 5 / 255) + 6 * round(g * 5 / 255) + round(b * 5 / 255)


class Framebuffer:
    """Fixed-size grid of packed ``0xRRGGBB`` colours."""

    def __init__(self, width: int, height: int, *, background: int = 0x000000) -> None:
        if width < 1 or height < 1:
            raise ValueError("Framebuffer requires width and height >= 1")
        self.width = width
        self.height = height
        self.background = background
        self.buffer: List[int] = [background] * (width * height)

    def clear(self, color: Optional[int] = None) -> None:
        fill = self.background if color is None else color
        self.buffer[:] = [fill] * (self.width * self.height)

    def write_pixel(self, x: int, y: int, color: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.buffer[y * self.width + x] = color

    def write_row(self, y: int, colors: Sequence[int]) -> None:
        if not 0 <= y < self.height:
            return
        count = min(len(colors), self.width)
        start = y * self.width
        self.buffer[start:start + count] = colors[:count]

    def get_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        return self.buffer[y * self.width + x]

    def to_image(self) -> Image.Image:
        data = bytearray()
        for color in self.buffer:
            data += bytes(((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF))
        return Image.frombytes("RGB", (self.width, self.height), bytes(data))

    def save(self, path: Union[str, PathLike]) -> None:
        self.to_image().save(path)

    def to_ansi(self) -> str:
        reset = "\033[0m"
        lines: List[str] = []
        for y in range(self.height):
            current: Optional[int] = None
            parts: List[str] = []
            for color in self.buffer[y * self.width:(y + 1) * self.width]:
                code = ansi_from_hex(color)
                if code != current:
                    parts.append(f"\033[48;5;{code}m")
                    current = code
                parts.append(" ")
            parts.append(reset)
            lines.append("".join(parts))
        return "\n".join(lines)
