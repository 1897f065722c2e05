"""
Shared fixtures for the hunter analysis tests.

Fights are built from raw log dicts the same way the API builds them.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend" / "src"))

from report import Encounter, Fight, Source  # noqa: E402

PLAYER_ID = 1
PET_ID = 2
BOSS_ID = 100


def raw_event(
    event_type,
    timestamp,
    ability_id,
    source_id=PLAYER_ID,
    target_id=BOSS_ID,
    **fields,
):
    event = {
        "type": event_type,
        "timestamp": timestamp,
        "abilityGameID": ability_id,
        "sourceID": source_id,
        "targetID": target_id,
    }
    event.update(fields)
    return event


def build_fight(events, end_time=30000, start_time=0, combatant_info=None):
    return Fight(
        Source(PLAYER_ID, "Huntard", {PET_ID}),
        Encounter(2265, "Champion of the Light"),
        start_time,
        end_time,
        events,
        combatant_info,
    )


@pytest.fixture
def make_fight():
    """Factory for fights played by a hunter with a single pet."""
    return build_fight
