from enum import Enum

from vectors import as_vec3


class SurfaceKind(Enum):
    DIFFUSE = 0
    REFLECTIVE = 1


class Surface:
    """Shared state of every primitive: base reflectance and shading kind."""

    def __init__(self, albedo, kind=SurfaceKind.DIFFUSE):
        self.albedo = as_vec3(albedo)
        self.kind = SurfaceKind(kind)

    def intersect(self, ray):
        """Return the nearest hit distance t >= 0 along the ray, or None."""
        raise NotImplementedError

    def surface_data(self, hit_point):
        """Return (normal, uv) at a point on the surface."""
        raise NotImplementedError
