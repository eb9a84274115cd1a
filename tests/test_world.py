import random

from marsrover.core import world as world_mod
from marsrover.core.world import HAZARD, MINERAL_TYPES, World

from conftest import place


def test_world_population(world):
    assert len(world.hazards) == world_mod.HAZARD_COUNT
    assert len(world.science) == world_mod.SCIENCE_COUNT
    for obs in world.hazards:
        assert obs.type == HAZARD
        assert obs.radius == 2.0
        assert 0.5 <= obs.size < 1.3
        assert 10 <= obs.distance_to(0, 0) <= 60
    for sci in world.science:
        assert sci.type in MINERAL_TYPES
        assert not sci.processed


def test_recycle_respawns_far_objects(world):
    far = world.hazards[0]
    place(far, 500, 0)
    respawned = world.recycle((0.0, 0.0))
    assert respawned >= 1
    assert 40 <= far.distance_to(0, 0) <= 80


def test_spawn_resets_processed_science():
    w = World(rng=random.Random(1))
    sci = w.science[0]
    sci.processed = True
    sci.visible = False
    w.spawn(sci, (0.0, 0.0), 40, 80)
    assert not sci.processed
    assert sci.visible


def test_nearest_unprocessed_skips_processed(quiet_world):
    a, b = quiet_world.science[0], quiet_world.science[1]
    place(a, 3, 0)
    place(b, 8, 0)
    target, dist = quiet_world.nearest_unprocessed(0, 0)
    assert target is a
    assert abs(dist - 3) < 1e-9

    a.processed = True
    target, _ = quiet_world.nearest_unprocessed(0, 0)
    assert target is b
