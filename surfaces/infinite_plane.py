import math

import numpy as np
from numba import njit

from surfaces.surface import Surface, SurfaceKind
from vectors import as_vec3, normalize


# Repeat period of the planar texture coordinates
UV_TILE_SIZE = 1000.0


@njit(cache=True)
def _plane_intersect(ray_origin, ray_direction, center, normal):
    """
    Ray-plane intersection against a unit normal (JIT-compiled).

    Returns t >= 0, or np.inf for a miss or a near-parallel ray.
    """
    denom = (ray_direction[0] * normal[0] +
             ray_direction[1] * normal[1] +
             ray_direction[2] * normal[2])

    if abs(denom) <= 1e-6:
        return np.inf

    t = ((center[0] - ray_origin[0]) * normal[0] +
         (center[1] - ray_origin[1]) * normal[1] +
         (center[2] - ray_origin[2]) * normal[2]) / denom

    if t < 0:
        return np.inf
    return t


class InfinitePlane(Surface):
    def __init__(self, center, normal, albedo, kind=SurfaceKind.DIFFUSE):
        super().__init__(albedo, kind)
        self.center = as_vec3(center)
        self.normal = as_vec3(normal)
        self.unit_normal = normalize(self.normal)

    def intersect(self, ray):
        t = _plane_intersect(ray.origin, ray.direction, self.center, self.unit_normal)
        if t == np.inf:
            return None
        return t

    def surface_data(self, hit_point):
        offset = hit_point - self.center
        uv = np.array([
            math.fmod(offset[0], UV_TILE_SIZE) / UV_TILE_SIZE,
            math.fmod(offset[1], UV_TILE_SIZE) / UV_TILE_SIZE,
        ])
        return self.unit_normal, uv
