import unittest

from biome_tracer.renderer.color import Color
from biome_tracer.renderer.cube import Cube
from biome_tracer.renderer.light import Light, calculate_lighting, cast_shadow, fresnel_effect, reflect
from biome_tracer.renderer.material import Material
from biome_tracer.renderer.texture import Texture
from biome_tracer.renderer.vector import Vec3

WHITE = Color(255.0, 255.0, 255.0)
GREY = Texture.solid(Color(128.0, 128.0, 128.0))
POINT = Vec3(0.0, 0.0, 0.0)
NORMAL = Vec3(0.0, 1.0, 0.0)
OVERHEAD = Light(Vec3(0.0, 10.0, 0.0), WHITE, 1.0)


def slab(low_y: float, high_y: float) -> Cube:
    material = Material((1.0, 0.0), 1.0, 0.0, 0.0, WHITE, WHITE)
    return Cube(Vec3(-1.0, low_y, -1.0), Vec3(1.0, high_y, 1.0), material, GREY, GREY, GREY)


def material(albedo=(1.0, 0.0), specular=8.0) -> Material:
    return Material(albedo, specular, 0.0, 0.0, Color(200.0, 100.0, 50.0), WHITE)


class ReflectTests(unittest.TestCase):
    def test_reflect_mirrors_about_normal(self) -> None:
        self.assertEqual(reflect(Vec3(1.0, -1.0, 0.0), NORMAL), Vec3(1.0, 1.0, 0.0))


class CastShadowTests(unittest.TestCase):
    def test_unobstructed_light_casts_no_shadow(self) -> None:
        self.assertEqual(cast_shadow(POINT, NORMAL, OVERHEAD, []), 0.0)
        beside = Cube(Vec3(5.0, 0.0, 5.0), Vec3(6.0, 1.0, 6.0), material(), GREY, GREY, GREY)
        self.assertEqual(cast_shadow(POINT, NORMAL, OVERHEAD, [beside]), 0.0)

    def test_occluder_attenuates_by_squared_distance_ratio(self) -> None:
        shadow = cast_shadow(POINT, NORMAL, OVERHEAD, [slab(4.0, 5.0)])
        self.assertAlmostEqual(shadow, 0.84, places=3)
        self.assertGreater(shadow, 0.0)
        self.assertLessEqual(shadow, 1.0)

    def test_occluder_beyond_light_is_ignored(self) -> None:
        light = Light(Vec3(0.0, 3.0, 0.0), WHITE, 1.0)
        self.assertEqual(cast_shadow(POINT, NORMAL, light, [slab(4.0, 5.0)]), 0.0)

    def test_first_occluder_in_scene_order_wins(self) -> None:
        shadow = cast_shadow(POINT, NORMAL, OVERHEAD, [slab(8.0, 9.0), slab(4.0, 5.0)])
        self.assertAlmostEqual(shadow, 0.36, places=3)

    def test_surface_does_not_shadow_itself(self) -> None:
        ground = slab(-1.0, 0.0)
        self.assertEqual(cast_shadow(POINT, NORMAL, OVERHEAD, [ground]), 0.0)

    def test_light_behind_surface_offsets_feeler_inwards(self) -> None:
        below = Light(Vec3(0.0, -10.0, 0.0), WHITE, 1.0)
        ground = slab(-1.0, 0.0)
        self.assertEqual(cast_shadow(POINT, NORMAL, below, [ground]), 0.0)

    def test_light_on_surface_casts_no_shadow(self) -> None:
        light = Light(POINT, WHITE, 1.0)
        self.assertEqual(cast_shadow(POINT, NORMAL, light, [slab(4.0, 5.0)]), 0.0)

    def test_shadow_stays_in_unit_range(self) -> None:
        for low in (0.001, 0.5, 2.0, 6.0, 9.5):
            with self.subTest(low=low):
                shadow = cast_shadow(POINT, NORMAL, OVERHEAD, [slab(low, low + 0.25)])
                self.assertGreaterEqual(shadow, 0.0)
                self.assertLessEqual(shadow, 1.0)


class CalculateLightingTests(unittest.TestCase):
    def test_diffuse_term_for_light_along_normal(self) -> None:
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(), [OVERHEAD], [])
        self.assertAlmostEqual(color.r, 200.0)
        self.assertAlmostEqual(color.g, 100.0)
        self.assertAlmostEqual(color.b, 50.0)

    def test_light_behind_surface_contributes_nothing(self) -> None:
        below = Light(Vec3(0.0, -10.0, 0.0), WHITE, 1.0)
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(albedo=(1.0, 1.0)), [below], [])
        self.assertEqual(color.to_hex(), 0x000000)

    def test_specular_term_is_white(self) -> None:
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(albedo=(0.0, 1.0)), [OVERHEAD], [])
        self.assertAlmostEqual(color.r, 255.0)
        self.assertAlmostEqual(color.g, 255.0)
        self.assertAlmostEqual(color.b, 255.0)

    def test_specular_fades_away_from_mirror_direction(self) -> None:
        view = Vec3(1.0, 1.0, 0.0).normalized()
        color = calculate_lighting(POINT, NORMAL, view, material(albedo=(0.0, 1.0), specular=8.0), [OVERHEAD], [])
        self.assertAlmostEqual(color.r, 255.0 * (0.5 ** 0.5) ** 8)

    def test_shadow_scales_light_contribution(self) -> None:
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(), [OVERHEAD], [slab(4.0, 5.0)])
        self.assertAlmostEqual(color.r, 200.0 * 0.16, places=1)

    def test_lights_accumulate_without_clamping(self) -> None:
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(), [OVERHEAD, OVERHEAD], [])
        self.assertAlmostEqual(color.r, 400.0)
        self.assertEqual(color.to_hex() >> 16, 0xFF)

    def test_light_colour_does_not_tint(self) -> None:
        red = Light(Vec3(0.0, 10.0, 0.0), Color(255.0, 0.0, 0.0), 1.0)
        color = calculate_lighting(POINT, NORMAL, NORMAL, material(), [red], [])
        self.assertAlmostEqual(color.g, 100.0)


class FresnelTests(unittest.TestCase):
    def test_head_on_view_returns_base_reflectance(self) -> None:
        self.assertAlmostEqual(fresnel_effect(NORMAL, NORMAL, 0.3), 0.3)

    def test_grazing_view_is_fully_reflective(self) -> None:
        self.assertAlmostEqual(fresnel_effect(NORMAL, Vec3(1.0, 0.0, 0.0), 0.3), 1.0)
        self.assertAlmostEqual(fresnel_effect(NORMAL, Vec3(0.0, -1.0, 0.0), 0.3), 1.0)

    def test_schlick_curve(self) -> None:
        view = Vec3(0.0, 0.5, 0.75 ** 0.5)
        self.assertAlmostEqual(fresnel_effect(NORMAL, view, 0.5), 0.515625)


if __name__ == "__main__":
    unittest.main()
