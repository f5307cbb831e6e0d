from enum import Enum

import numpy as np

from vectors import as_vec3


class RayKind(Enum):
    PRIMARY = "primary"
    SHADOW = "shadow"
    REFLECTION = "reflection"


class Ray:
    """
    A ray with a unit direction.

    t_max bounds the valid hit distance; shadow rays set it to the distance
    of the light they test.
    """

    def __init__(self, origin, direction, t_max=np.inf, kind=RayKind.PRIMARY):
        self.origin = as_vec3(origin)
        self.direction = as_vec3(direction)
        self.t_max = t_max
        self.kind = kind

    def at(self, t):
        return self.origin + t * self.direction

    def __repr__(self):
        return "Ray(origin={}, direction={}, t_max={}, kind={})".format(
            self.origin.tolist(), self.direction.tolist(), self.t_max, self.kind.name)
