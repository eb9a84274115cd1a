import math

from marsrover.core import terrain


def test_height_formula():
    assert terrain.height(0, 0) == 0
    x, z = 12.5, -7.0
    expected = math.sin(x * 0.1) * math.cos(z * 0.1) * 2 + math.sin(x * 0.3 + z * 0.2) * 0.5
    assert terrain.height(x, z) == expected


def test_height_grid_is_centred_on_the_rover():
    grid = terrain.height_grid(10.0, -4.0)
    assert grid.shape == (terrain.TERRAIN_RES + 1, terrain.TERRAIN_RES + 1)
    mid = terrain.TERRAIN_RES // 2
    assert abs(grid[mid, mid] - terrain.height(10.0, -4.0)) < 1e-9
    # row runs along z, column along x
    assert abs(grid[0, -1] - terrain.height(10.0 + 60, -4.0 - 60)) < 1e-9
