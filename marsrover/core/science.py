# marsrover/core/science.py
import random

from marsrover.core import alerts

ACCEPTED = "accepted"
REJECTED = "rejected"
PENDING = "pending"

COMPOSITIONS = {
    "Hematite": "Fe₂O₃: 92%",
    "Olivine": "(Mg,Fe)₂SiO₄",
    "Silica": "SiO₂: 98%",
}


def initial_targets():
    return [
        {"id": "init-1", "title": "Target A-42", "tags": ["Hydrated Silica"],
         "composition": "Si: 88%, O: 12%", "score": 98, "status": PENDING,
         "color": "bg-amber-700", "has_visual": False},
        {"id": "init-2", "title": "Target B-11", "tags": ["Basaltic"],
         "composition": "Fe: 24%, Mg: 18%", "score": 85, "status": PENDING,
         "color": "bg-slate-600", "has_visual": False},
    ]


def add_found_target(state, mineral, rng=random):
    target_id = f"AUTO-{rng.randrange(1000)}"
    target = {
        "id": target_id,
        "title": f"Sample {target_id}",
        "tags": [mineral, "AI Detected"],
        "composition": COMPOSITIONS.get(mineral, "Complex Silicate"),
        "score": 85 + rng.randrange(15),
        "status": PENDING,
        "color": "bg-cyan-900 border-cyan-500",
        "has_visual": True,
    }
    state.science_targets.insert(0, target)
    state.log.add(f"ANALYSIS COMPLETE: {mineral} identified. Processed visual uplinking...", alerts.SUCCESS)
    return target


def review(state, target_id, action):
    """Accept (uplink) or reject a pending target.

    Returns False when nothing was done: the uplink is down or no
    pending target has that id.
    """
    if action not in (ACCEPTED, REJECTED):
        raise ValueError(f"unknown review action: {action}")
    if state.link_lost:
        return False

    found = False
    for target in state.science_targets:
        if target["id"] == target_id and target["status"] == PENDING:
            target["status"] = action
            found = True
    if not found:
        return False

    if action == ACCEPTED:
        state.log.add(f"Target {target_id} queued for uplink. Priority High.", alerts.SUCCESS)
        state.data_processed = round(state.data_processed + 0.05, 2)
    else:
        state.log.add(f"Target {target_id} discarded. Bandwidth conserved.", alerts.NOMINAL)
        state.bandwidth_saved = round(min(state.bandwidth_saved + 0.1, 99.9), 1)
    return True


def pending(state):
    return [t for t in state.science_targets if t["status"] == PENDING]
