import numpy as np

from surfaces.infinite_plane import _plane_intersect
from surfaces.surface import Surface, SurfaceKind
from vectors import as_vec3, dot, normalize


class Disk(Surface):
    """A plane intersection bounded by a radius around the center."""

    def __init__(self, center, normal, radius, albedo, kind=SurfaceKind.DIFFUSE):
        super().__init__(albedo, kind)
        self.center = as_vec3(center)
        self.normal = as_vec3(normal)
        self.unit_normal = normalize(self.normal)
        self.radius = float(radius)

    def intersect(self, ray):
        t = _plane_intersect(ray.origin, ray.direction, self.center, self.unit_normal)
        if t == np.inf:
            return None

        offset = ray.at(t) - self.center
        if dot(offset, offset) > self.radius * self.radius:
            return None
        return t

    def surface_data(self, hit_point):
        # No texture coordinates on disks
        return self.unit_normal, np.zeros(2)
