import os
import tempfile
import unittest

from PIL import Image

from biome_tracer.renderer.framebuffer import Framebuffer, ansi_from_hex


class FramebufferTests(unittest.TestCase):
    def setUp(self) -> None:
        self.framebuffer = Framebuffer(4, 3)

    def test_write_and_read_pixel(self) -> None:
        self.framebuffer.write_pixel(2, 1, 0x123456)
        self.assertEqual(self.framebuffer.get_pixel(2, 1), 0x123456)
        self.assertEqual(self.framebuffer.buffer[1 * 4 + 2], 0x123456)

    def test_out_of_range_writes_are_ignored(self) -> None:
        for x, y in ((-1, 0), (4, 0), (0, 3), (0, -1)):
            self.framebuffer.write_pixel(x, y, 0xFFFFFF)
        for y in (-1, 3):
            self.framebuffer.write_row(y, [0xFFFFFF] * 4)
        self.assertEqual(set(self.framebuffer.buffer), {0x000000})

    def test_write_row_truncates_to_width(self) -> None:
        self.framebuffer.write_row(0, [1, 2, 3, 4, 5, 6])
        self.assertEqual(self.framebuffer.buffer[:5], [1, 2, 3, 4, 0])

    def test_clear(self) -> None:
        self.framebuffer.clear(0xABCDEF)
        self.assertEqual(set(self.framebuffer.buffer), {0xABCDEF})
        self.framebuffer.clear()
        self.assertEqual(set(self.framebuffer.buffer), {0x000000})

    def test_invalid_size_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Framebuffer(0, 10)

    def test_get_pixel_outside_raises(self) -> None:
        with self.assertRaises(IndexError):
            self.framebuffer.get_pixel(4, 0)

    def test_to_image_unpacks_channels(self) -> None:
        self.framebuffer.write_pixel(1, 2, 0xFF8000)
        image = self.framebuffer.to_image()
        self.assertEqual(image.size, (4, 3))
        self.assertEqual(image.getpixel((1, 2)), (255, 128, 0))
        self.assertEqual(image.getpixel((0, 0)), (0, 0, 0))

    def test_save_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "frame.png")
            self.framebuffer.save(path)
            with Image.open(path) as image:
                self.assertEqual(image.size, (4, 3))

    def test_ansi_output_has_one_line_per_row(self) -> None:
        self.framebuffer.write_pixel(0, 0, 0xFF0000)
        text = self.framebuffer.to_ansi()
        lines = text.split("\n")
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("\033[48;5;196m "))
        self.assertIn("\033[48;5;16m", lines[0])

    def test_ansi_colour_cube_mapping(self) -> None:
        self.assertEqual(ansi_from_hex(0x000000), 16)
        self.assertEqual(ansi_from_hex(0xFFFFFF), 231)
        self.assertEqual(ansi_from_hex(0x0000FF), 21)


if __name__ == "__main__":
    unittest.main()
