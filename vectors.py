import numpy as np


# Lengths below this are treated as degenerate by normalize()
EPSILON = 1e-12


def vec3(x, y, z):
    """Build a float64 3-vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(v):
    return np.array(v, dtype=np.float64).reshape(3)


def dot(a, b):
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a, b):
    return np.cross(a, b)


def length(v):
    return float(np.sqrt(dot(v, v)))


def normalize(v):
    """Normalize a vector.

    Callers must not pass a zero-length vector; such input is returned
    unchanged instead of being divided by zero.
    """
    norm = length(v)
    if norm < EPSILON:
        return v
    return v / norm


def reflect(d, n):
    """Reflect direction d around normal n."""
    return d - 2 * dot(d, n) * n


def clamp(color, lo=0.0, hi=1.0):
    return np.clip(color, lo, hi)
