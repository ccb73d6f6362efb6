import math
import unittest

from biome_tracer.renderer.camera import PITCH_LIMIT, Camera, CameraError
from biome_tracer.renderer.vector import Vec3

ORIGIN = Vec3(0.0, 0.0, 0.0)
UP = Vec3(0.0, 1.0, 0.0)


class CameraBasisTests(unittest.TestCase):
    def test_base_change_of_unrotated_camera_is_identity(self) -> None:
        camera = Camera(Vec3(0.0, 0.0, 1.0), ORIGIN, UP)
        for vector in (Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0), Vec3(0.0, 0.0, -1.0), Vec3(0.3, -0.2, 0.9)):
            with self.subTest(vector=vector):
                self.assertTrue(camera.base_change(vector).is_close(vector))

    def test_forward_ray_points_at_center(self) -> None:
        camera = Camera(Vec3(0.0, 5.0, 35.0), ORIGIN, UP)
        expected = (ORIGIN - camera.eye).normalized()
        self.assertTrue(camera.base_change(Vec3(0.0, 0.0, -1.0)).is_close(expected))

    def test_basis_is_orthonormal(self) -> None:
        camera = Camera(Vec3(3.0, 4.0, -7.0), Vec3(1.0, 0.5, 0.0), UP)
        for axis in (camera.forward, camera.right, camera.true_up):
            self.assertAlmostEqual(axis.length(), 1.0)
        self.assertAlmostEqual(camera.forward.dot(camera.right), 0.0)
        self.assertAlmostEqual(camera.forward.dot(camera.true_up), 0.0)
        self.assertAlmostEqual(camera.right.dot(camera.true_up), 0.0)

    def test_degenerate_configurations_rejected(self) -> None:
        with self.assertRaises(CameraError):
            Camera(Vec3(0.0, 10.0, 0.0), ORIGIN, UP)
        with self.assertRaises(CameraError):
            Camera(ORIGIN, ORIGIN, UP)
        with self.assertRaises(ValueError):
            Camera(Vec3(0.0, 0.0, 5.0), ORIGIN, UP, min_distance=0.0)


class CameraMotionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.camera = Camera(Vec3(0.0, 5.0, 35.0), ORIGIN, UP)

    def test_orbit_then_inverse_restores_eye(self) -> None:
        start = self.camera.eye
        self.camera.orbit(0.3, 0.2)
        self.assertFalse(self.camera.eye.is_close(start))
        self.camera.orbit(-0.3, -0.2)
        self.assertTrue(self.camera.eye.is_close(start, 1e-9))

    def test_orbit_preserves_distance(self) -> None:
        distance = self.camera.distance
        self.camera.orbit(1.1, -0.4)
        self.assertAlmostEqual(self.camera.distance, distance)

    def test_quarter_yaw_moves_eye_around_y_axis(self) -> None:
        camera = Camera(Vec3(0.0, 0.0, 10.0), ORIGIN, UP)
        camera.orbit(math.pi / 2.0, 0.0)
        self.assertTrue(camera.eye.is_close(Vec3(-10.0, 0.0, 0.0)))

    def test_orbit_updates_basis(self) -> None:
        self.camera.orbit(0.7, 0.1)
        expected = (self.camera.center - self.camera.eye).normalized()
        self.assertTrue(self.camera.forward.is_close(expected))
        self.assertTrue(self.camera.base_change(Vec3(0.0, 0.0, -1.0)).is_close(expected))

    def test_pitch_is_clamped_before_the_pole(self) -> None:
        self.camera.orbit(0.0, 10.0)
        radius = self.camera.distance
        self.assertAlmostEqual(self.camera.eye.y, -radius * math.sin(PITCH_LIMIT))
        self.assertLess(abs(self.camera.forward.dot(UP)), 1.0)
        self.camera.orbit(0.0, -20.0)
        self.assertAlmostEqual(self.camera.eye.y, radius * math.sin(PITCH_LIMIT))

    def test_zoom_moves_along_view_axis(self) -> None:
        camera = Camera(Vec3(0.0, 0.0, 10.0), ORIGIN, UP)
        camera.zoom(4.0)
        self.assertTrue(camera.eye.is_close(Vec3(0.0, 0.0, 6.0)))
        camera.zoom(-2.0)
        self.assertAlmostEqual(camera.distance, 8.0)

    def test_zoom_never_reaches_center(self) -> None:
        self.camera.zoom(1000.0)
        self.assertAlmostEqual(self.camera.distance, self.camera.min_distance)
        self.assertTrue(self.camera.forward.is_close((ORIGIN - self.camera.eye).normalized()))


if __name__ == "__main__":
    unittest.main()
