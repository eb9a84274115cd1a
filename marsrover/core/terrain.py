# marsrover/core/terrain.py
import math

import numpy as np

TERRAIN_SIZE = 120
TERRAIN_RES = 60


def height(x, z):
    return math.sin(x * 0.1) * math.cos(z * 0.1) * 2 + math.sin(x * 0.3 + z * 0.2) * 0.5


def height_grid(center_x, center_z, size=TERRAIN_SIZE, res=TERRAIN_RES):
    """Heights of the (res+1) x (res+1) terrain patch centred on a point.

    Row i runs along z, column j along x, both from -size/2 to +size/2.
    """
    offsets = np.linspace(-size / 2.0, size / 2.0, res + 1)
    xs, zs = np.meshgrid(offsets + center_x, offsets + center_z)
    return np.sin(xs * 0.1) * np.cos(zs * 0.1) * 2 + np.sin(xs * 0.3 + zs * 0.2) * 0.5
