import os
import sys
import pytest

# Ensure the packages can be imported without installing
sys.path.append(os.getcwd())


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from tactics_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def catalog():
    """The shipped ability catalog."""
    from tactics_engine.core.config import DEFAULT_DATA_PATH
    from tactics_framework.battle.abilities import load_catalog
    return load_catalog(DEFAULT_DATA_PATH)


@pytest.fixture
def battle_state():
    """Empty 13x13 battle."""
    from tactics_framework.battle.state import BattleState
    return BattleState.create(13, 13)


@pytest.fixture
def system(event_bus, catalog):
    """GameSystem on an empty 13x13 map with the shipped catalog."""
    from tactics_framework.battle.system import GameSystem
    return GameSystem(events=event_bus, catalog=catalog)


@pytest.fixture
def make_unit():
    """Factory for units with explicit ids."""
    from tactics_framework.battle.unit import create_unit
    from tactics_framework.components import Job

    def _make(unit_id, job=Job.KNIGHT, position=(0, 0), team_id=0, **kwargs):
        return create_unit(unit_id, job, position, team_id, unit_id=unit_id, **kwargs)

    return _make
