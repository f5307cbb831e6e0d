import numpy as np

from matrix44 import Matrix44
from vectors import as_vec3, dot, normalize, vec3


class Light:
    """A light placed in the world through its light-to-world transform."""

    def __init__(self, light_to_world=None, color=(1.0, 1.0, 1.0), intensity=1.0):
        self.light_to_world = light_to_world if light_to_world is not None else Matrix44()
        self.color = as_vec3(color)
        self.intensity = float(intensity)

    def shading_info(self, point):
        """
        Illumination arriving at point.

        Returns:
            (light_dir, intensity, distance) - light_dir points from the light
            towards the point, intensity is an RGB array and distance bounds
            the shadow ray
        """
        raise NotImplementedError


class DistantLight(Light):
    """Sun-like light: a fixed direction, no falloff, infinitely far away."""

    def __init__(self, light_to_world=None, color=(1.0, 1.0, 1.0), intensity=1.0):
        super().__init__(light_to_world, color, intensity)
        self.direction = normalize(self.light_to_world.transform_direction(vec3(0.0, 0.0, -1.0)))

    def shading_info(self, point):
        return self.direction, self.color * self.intensity / np.pi, np.inf


class PointLight(Light):
    """Light emitted from a single position with inverse-square falloff."""

    def __init__(self, light_to_world=None, color=(1.0, 1.0, 1.0), intensity=1.0):
        super().__init__(light_to_world, color, intensity)
        self.position = self.light_to_world.transform_point(vec3(0.0, 0.0, 0.0))

    def shading_info(self, point):
        delta = as_vec3(point) - self.position
        r2 = dot(delta, delta)
        distance = np.sqrt(r2)
        light_dir = delta / distance
        intensity = self.color * self.intensity / (4 * np.pi * r2)
        return light_dir, intensity, distance
