import logging

import numpy as np
from numba import njit

from vectors import as_vec3, cross, normalize, vec3


logger = logging.getLogger(__name__)

WORLD_UP = vec3(0.0, 1.0, 0.0)


@njit(cache=True)
def _gauss_jordan_inverse(m):
    """
    Invert a 4x4 matrix with Gauss-Jordan elimination (JIT-compiled).

    Works on the augmented system [t | s] with partial pivoting.

    Returns:
        (ok, inverse) - ok is False when a zero pivot was met
    """
    t = m.copy()
    s = np.eye(4)

    # Forward elimination
    for i in range(3):
        pivot = i
        pivot_size = abs(t[i, i])

        for j in range(i + 1, 4):
            tmp = abs(t[j, i])
            if tmp > pivot_size:
                pivot = j
                pivot_size = tmp

        if pivot_size == 0.0:
            return False, s

        if pivot != i:
            for j in range(4):
                tmp = t[i, j]
                t[i, j] = t[pivot, j]
                t[pivot, j] = tmp

                tmp = s[i, j]
                s[i, j] = s[pivot, j]
                s[pivot, j] = tmp

        for j in range(i + 1, 4):
            f = t[j, i] / t[i, i]
            for k in range(4):
                t[j, k] -= f * t[i, k]
                s[j, k] -= f * s[i, k]

    # Backward substitution
    for i in range(3, -1, -1):
        f = t[i, i]
        if f == 0.0:
            return False, s

        for j in range(4):
            t[i, j] /= f
            s[i, j] /= f

        for j in range(i):
            f = t[j, i]
            for k in range(4):
                t[j, k] -= f * t[i, k]
                s[j, k] -= f * s[i, k]

    return True, s


class Matrix44:
    """
    Row-major 4x4 affine transform.

    Points and directions are row vectors (p' = p . M), so in ``a * b`` the
    transform ``a`` is applied first.
    """

    def __init__(self, values=None):
        if values is None:
            values = np.eye(4)
        self.m = np.array(values, dtype=np.float64, order='C').reshape(4, 4)

    def __getitem__(self, index):
        return self.m[index]

    def __mul__(self, other):
        return self.multiply(other)

    def __repr__(self):
        return "Matrix44({})".format(self.m.tolist())

    def multiply(self, other):
        return Matrix44(self.m @ other.m)

    def transform_point(self, p):
        """Transform a point (implicit w=1), dividing by w when it is not 0 or 1."""
        p = as_vec3(p)
        m = self.m
        dst = p @ m[:3, :3] + m[3, :3]
        w = p @ m[:3, 3] + m[3, 3]
        if w != 1 and w != 0:
            dst = dst / w
        return dst

    def transform_direction(self, d):
        """Transform a direction: linear part only, translation is ignored."""
        return as_vec3(d) @ self.m[:3, :3]

    def transpose(self):
        return Matrix44(self.m.T)

    def try_inverse(self):
        """Invert the matrix, returning None when it is singular."""
        ok, inv = _gauss_jordan_inverse(self.m)
        if not ok:
            return None
        return Matrix44(inv)

    def inverse(self):
        """
        Invert the matrix.

        A singular matrix yields the identity matrix. Callers that need to
        tell the two apart should use try_inverse().
        """
        inv = self.try_inverse()
        if inv is None:
            logger.warning("Cannot invert singular matrix, returning identity")
            return Matrix44()
        return inv

    @staticmethod
    def translate(x, y, z):
        ret = Matrix44()
        ret.m[3, :3] = (x, y, z)
        return ret

    @staticmethod
    def rotate_x(rad):
        """Rotation around the x-axis."""
        c, s = np.cos(rad), np.sin(rad)
        ret = Matrix44()
        ret.m[1, 1] = c
        ret.m[1, 2] = s
        ret.m[2, 1] = -s
        ret.m[2, 2] = c
        return ret

    @staticmethod
    def rotate_y(rad):
        """Rotation around the y-axis."""
        c, s = np.cos(rad), np.sin(rad)
        ret = Matrix44()
        ret.m[0, 0] = c
        ret.m[2, 0] = s
        ret.m[0, 2] = -s
        ret.m[2, 2] = c
        return ret

    @staticmethod
    def rotate_z(rad):
        """Rotation around the z-axis."""
        c, s = np.cos(rad), np.sin(rad)
        ret = Matrix44()
        ret.m[0, 0] = c
        ret.m[0, 1] = s
        ret.m[1, 0] = -s
        ret.m[1, 1] = c
        return ret

    @staticmethod
    def look_at(position, target):
        """
        Build a camera-to-world matrix looking from position at target.

        World up is (0, 1, 0); looking straight up or down is not supported.
        """
        position = as_vec3(position)
        forward = normalize(position - as_vec3(target))
        right = normalize(cross(WORLD_UP, forward))
        up = cross(forward, right)

        ret = Matrix44()
        ret.m[0, :3] = right
        ret.m[1, :3] = up
        ret.m[2, :3] = forward
        ret.m[3, :3] = position
        return ret
