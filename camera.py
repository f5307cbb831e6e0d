import numpy as np

from matrix44 import Matrix44
from rays import Ray, RayKind
from vectors import normalize, vec3


class Camera:
    """Pinhole camera looking down its local -z axis."""

    def __init__(self, camera_to_world=None, field_of_view=np.pi / 2):
        self.camera_to_world = camera_to_world if camera_to_world is not None else Matrix44()
        self.field_of_view = float(field_of_view)
        self.position = self.camera_to_world.transform_point(vec3(0.0, 0.0, 0.0))

    @classmethod
    def look_at(cls, position, target, field_of_view=np.pi / 2):
        return cls(Matrix44.look_at(position, target), field_of_view)

    def generate_ray(self, x, y, image_width, image_height):
        """Generate a primary ray through the center of pixel (x, y)."""
        scale = np.tan(self.field_of_view / 2)
        aspect_ratio = image_width / image_height

        px = (2 * (x + 0.5) / image_width - 1) * scale * aspect_ratio
        py = (1 - 2 * (y + 0.5) / image_height) * scale

        screen_point = self.camera_to_world.transform_point(vec3(px, py, -1.0))
        direction = normalize(screen_point - self.position)

        return Ray(self.position, direction, kind=RayKind.PRIMARY)
