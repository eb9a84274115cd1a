import math
import random

import pytest

from marsrover import config
from marsrover.core import terrain
from marsrover.core.state_manager import RoverState
from marsrover.core.world import World
from marsrover.web import dashboard_server


def place(obj, x, z):
    obj.position = (x, terrain.height(x, z), z)
    obj.visible = True


def park(world, dist=50.0):
    """Move every object onto a far ring, out of sensing range."""
    objs = world.objects
    for i, obj in enumerate(objs):
        angle = 2 * math.pi * i / len(objs)
        place(obj, math.cos(angle) * dist, math.sin(angle) * dist)
        if hasattr(obj, "processed"):
            obj.processed = False


@pytest.fixture(autouse=True)
def no_telegram(monkeypatch):
    monkeypatch.setattr(config, "TELEGRAM_TOKEN", "")
    monkeypatch.setattr(config, "TELEGRAM_CHAT_ID", "")


@pytest.fixture
def state():
    return RoverState()


@pytest.fixture
def world():
    return World(rng=random.Random(7))


@pytest.fixture
def quiet_world(world):
    park(world)
    return world


@pytest.fixture
def client(state):
    dashboard_server.state_ref = state
    dashboard_server.app.config["TESTING"] = True
    with dashboard_server.app.test_client() as c:
        yield c
