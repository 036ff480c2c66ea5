import pytest
from pydantic import ValidationError
from tactics_framework.components import Direction, Job, Position
from tactics_framework.battle.unit import (
    ActionState,
    create_unit,
    update_ct,
    reset_ct,
    move_unit,
    mark_action_used,
    reset_action_state,
)

def test_create_unit_from_job():
    unit = create_unit("Rex", Job.KNIGHT, (1, 1), 0, unit_id="k1")

    assert unit.id == "k1"
    assert unit.position == Position(1, 1)
    assert unit.direction == Direction.SOUTH
    assert unit.stats.hp == 100
    assert unit.stats.ct == 0
    assert unit.action_state == ActionState.IDLE
    assert unit.equipped.weapon == "iron_sword"
    assert unit.inventory == {"potion": 2}
    assert unit.is_alive

def test_generated_ids_are_unique():
    a = create_unit("A", Job.MAGE, (0, 0), 0)
    b = create_unit("B", Job.MAGE, (0, 0), 0)
    assert a.id != b.id

def test_stat_overrides():
    unit = create_unit("Tank", Job.KNIGHT, (0, 0), 0, stats={"hp": 40, "def_": 99})

    assert unit.stats.hp == 40
    assert unit.stats.max_hp == 100
    assert unit.stats.def_ == 99

def test_stat_override_accepts_alias():
    unit = create_unit("Tank", Job.KNIGHT, (0, 0), 0, stats={"def": 5})
    assert unit.stats.def_ == 5

def test_equipment_and_inventory_overrides():
    unit = create_unit(
        "Sage", Job.MAGE, (0, 0), 0,
        equipped={"magic": ("fire", "fireball")},
        inventory={},
    )

    assert unit.equipped.weapon == "rod"
    assert unit.equipped.magic == ("fire", "fireball")
    assert unit.inventory == {}
    assert unit.item_quantity("potion") == 0

def test_inventory_is_not_shared():
    a = create_unit("A", Job.MAGE, (0, 0), 0)
    b = create_unit("B", Job.MAGE, (0, 0), 0)
    assert a.inventory is not b.inventory

def test_negative_team_rejected():
    with pytest.raises(ValidationError):
        create_unit("X", Job.ROGUE, (0, 0), -1)

def test_allies(make_unit):
    a = make_unit("a", team_id=0)
    b = make_unit("b", team_id=0)
    c = make_unit("c", team_id=1)

    assert a.is_ally_of(b)
    assert not a.is_ally_of(c)

def test_update_and_reset_ct(make_unit):
    unit = make_unit("k1")

    charged = update_ct(unit)
    assert charged.stats.ct == 8
    assert update_ct(unit, ticks=3).stats.ct == 24
    assert unit.stats.ct == 0
    assert reset_ct(charged).stats.ct == 0

def test_move_spends_move_budget(make_unit):
    unit = make_unit("k1", position=(1, 1))
    moved = move_unit(unit, (3, 1))

    assert moved.position == Position(3, 1)
    assert moved.direction == Direction.EAST
    assert moved.action_state == ActionState.MOVED
    assert unit.position == Position(1, 1)

def test_move_facing_follows_dominant_axis(make_unit):
    unit = make_unit("k1", position=(5, 5))
    assert move_unit(unit, (4, 2)).direction == Direction.NORTH
    assert move_unit(unit, (5, 5)).direction == unit.direction

@pytest.mark.parametrize("start, after_move, after_action", [
    (ActionState.IDLE, ActionState.MOVED, ActionState.ACTION_USED),
    (ActionState.MOVED, ActionState.TURN_ENDED, ActionState.TURN_ENDED),
    (ActionState.ACTION_USED, ActionState.TURN_ENDED, ActionState.TURN_ENDED),
])
def test_action_state_table(make_unit, start, after_move, after_action):
    unit = make_unit("k1").evolve(action_state=start)

    assert move_unit(unit, (1, 0)).action_state == after_move
    assert mark_action_used(unit).action_state == after_action

def test_reset_action_state(make_unit):
    unit = make_unit("k1").evolve(action_state=ActionState.TURN_ENDED)

    assert unit.has_ended_turn
    assert reset_action_state(unit).action_state == ActionState.IDLE

def test_with_stats(make_unit):
    unit = make_unit("k1")
    hurt = unit.with_stats(hp=0)

    assert not hurt.is_alive
    assert hurt.stats.atk == unit.stats.atk
    assert unit.is_alive
