# marsrover/core/sensors.py
# Hazard ranging and slope look-ahead, the simulated stand-ins for the
# rover's range finder.
import math

from marsrover.core import terrain

ROVER_RADIUS = 1.5
SAFETY_MARGIN = 2.5
LOOK_AHEAD_DIST = 3.0
MAX_SLOPE_STEP = 1.5


def clearance(x, z, hazard):
    return hazard.distance_to(x, z) - (ROVER_RADIUS + hazard.radius + SAFETY_MARGIN)


def nearest_hazard(x, z, hazards):
    best, best_clear = None, 999
    for obs in hazards:
        c = clearance(x, z, obs)
        if c < best_clear:
            best, best_clear = obs, c
    return best, best_clear


def slope_ahead(x, z, heading, look_ahead=LOOK_AHEAD_DIST):
    """Height step between the rover and a point ``look_ahead`` in front.

    Returns (point, too_steep) where point is (x, y, z) of the probe.
    """
    ax = x - math.sin(heading) * look_ahead
    az = z - math.cos(heading) * look_ahead
    here = terrain.height(x, z)
    there = terrain.height(ax, az)
    return (ax, there, az), abs(there - here) > MAX_SLOPE_STEP


def is_too_close(x, z, hazards, threshold=0.0):
    _, c = nearest_hazard(x, z, hazards)
    return c < threshold
