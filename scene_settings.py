from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from vectors import as_vec3


@dataclass
class SceneSettings:
    """Render options: output size, reflection depth and background."""

    width: int = 640
    height: int = 480
    max_depth: int = 5
    background_color: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Image size must be positive, got {}x{}".format(self.width, self.height))
        if self.max_depth < 0:
            raise ValueError("max_depth must be non-negative, got {}".format(self.max_depth))
        self.width = int(self.width)
        self.height = int(self.height)
        self.max_depth = int(self.max_depth)
        self.background_color = as_vec3(self.background_color)
        # Written to the image as-is, so it must already be a displayable color
        if np.any(self.background_color < 0) or np.any(self.background_color > 1):
            raise ValueError("background_color channels must lie in [0, 1], got {}".format(
                self.background_color.tolist()))
