"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from camera import Camera
from light import DistantLight, PointLight
from matrix44 import Matrix44
from scene_settings import SceneSettings
from surfaces.infinite_plane import InfinitePlane
from surfaces.surface import SurfaceKind


@pytest.fixture
def ground_plane():
    """Diffuse grey plane through the origin facing +y."""
    return InfinitePlane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.5, 0.5, 0.5), SurfaceKind.DIFFUSE)


@pytest.fixture
def sun():
    """White distant light shining straight down."""
    return DistantLight(Matrix44.rotate_x(-np.pi / 2), (1.0, 1.0, 1.0), 1.0)


@pytest.fixture
def overhead_point_light():
    return PointLight(Matrix44.translate(0.0, 5.0, 0.0), (1.0, 1.0, 1.0), 100.0)


@pytest.fixture
def top_down_camera():
    """Camera at y=5 looking straight down at the origin."""
    return Camera(Matrix44.rotate_x(-np.pi / 2) * Matrix44.translate(0.0, 5.0, 0.0), np.radians(60))


@pytest.fixture
def small_settings():
    return SceneSettings(width=2, height=2, max_depth=3, background_color=(0.0, 0.0, 0.0))
