# marsrover/core/world.py
import itertools
import math
import random

from marsrover.core import terrain

HAZARD = "HAZARD"
MINERAL_TYPES = ["Hematite", "Olivine", "Sulfate", "Silica", "Magmatite"]

HAZARD_COUNT = 20
SCIENCE_COUNT = 8
HAZARD_RADIUS = 2.0
SCIENCE_RADIUS = 1.0

RECYCLE_DIST = 70
INITIAL_SPAWN = (10, 60)
RECYCLE_SPAWN = (40, 80)

_ids = itertools.count(1)


class WorldObject:
    def __init__(self, kind, radius):
        self.uuid = "obj-%d" % next(_ids)
        self.kind = kind
        self.radius = radius
        self.position = (0.0, 0.0, 0.0)
        self.visible = True

    def distance_to(self, x, z):
        return math.hypot(self.position[0] - x, self.position[2] - z)

    @property
    def type(self):
        return self.kind


class Hazard(WorldObject):
    def __init__(self, size):
        super().__init__(HAZARD, HAZARD_RADIUS)
        # rendered size; avoidance always uses HAZARD_RADIUS
        self.size = size


class SciencePoint(WorldObject):
    def __init__(self, index, mineral):
        super().__init__(mineral, SCIENCE_RADIUS)
        self.index = index
        self.processed = False


class World:
    """Hazards and science props scattered around the rover.

    Objects never get destroyed: once they fall too far behind they are
    respawned ahead in a ring around the rover, which gives the endless
    terrain its endless supply of rocks.
    """

    def __init__(self, rng=None, origin=(0.0, 0.0)):
        self.rng = rng or random.Random()
        self.hazards = []
        self.science = []

        for _ in range(HAZARD_COUNT):
            obs = Hazard(self.rng.random() * 0.8 + 0.5)
            self.spawn(obs, origin, *INITIAL_SPAWN)
            self.hazards.append(obs)

        for i in range(SCIENCE_COUNT):
            sci = SciencePoint(i, self.rng.choice(MINERAL_TYPES))
            self.spawn(sci, origin, *INITIAL_SPAWN)
            self.science.append(sci)

    @property
    def objects(self):
        return self.hazards + self.science

    def spawn(self, obj, origin, min_dist, max_dist):
        angle = self.rng.random() * math.pi * 2
        radius = min_dist + self.rng.random() * (max_dist - min_dist)
        x = origin[0] + math.cos(angle) * radius
        z = origin[1] + math.sin(angle) * radius
        obj.position = (x, terrain.height(x, z), z)
        obj.visible = True
        if isinstance(obj, SciencePoint):
            obj.processed = False

    def recycle(self, origin):
        respawned = 0
        for obj in self.objects:
            if obj.distance_to(*origin) > RECYCLE_DIST:
                self.spawn(obj, origin, *RECYCLE_SPAWN)
                respawned += 1
        return respawned

    def nearest_unprocessed(self, x, z):
        best, best_dist = None, 999
        for sci in self.science:
            if sci.processed:
                continue
            d = sci.distance_to(x, z)
            if d < best_dist:
                best, best_dist = sci, d
        return best, best_dist
