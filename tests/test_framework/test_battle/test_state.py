import pytest
from tactics_framework.components import Job, Position
from tactics_framework.battle.state import BattleState, CT_THRESHOLD
from tactics_framework.battle.unit import ActionState

def with_units(state, *units):
    for unit in units:
        state = state.add_unit(unit)
    return state

def test_create(battle_state):
    assert battle_state.map.width == 13
    assert battle_state.units == ()
    assert battle_state.turn_count == 0
    assert battle_state.tick_count == 0
    assert battle_state.active_unit_id is None

def test_updates_return_new_state(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1"))

    assert battle_state.units == ()
    assert state.get_unit("k1").name == "k1"
    assert state.map is battle_state.map

def test_replace_unit_keeps_order(battle_state, make_unit):
    state = with_units(battle_state, make_unit("a"), make_unit("b", position=(1, 0)))
    state = state.replace_unit(state.get_unit("a").with_stats(hp=1))

    assert [u.id for u in state.units] == ["a", "b"]
    assert state.get_unit("a").stats.hp == 1

def test_queries(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("a", position=(1, 1)),
        make_unit("b", position=(2, 2), team_id=1),
    )

    assert state.unit_at(Position(2, 2)).id == "b"
    assert state.unit_at((5, 5)) is None
    assert state.get_unit("zzz") is None
    assert state.occupied_positions() == {Position(1, 1), Position(2, 2)}
    assert state.occupied_positions(exclude="a") == {Position(2, 2)}
    assert [u.id for u in state.team(1)] == ["b"]

def test_lone_knight_activates_on_thirteenth_tick(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1", position=(1, 1)))

    for _ in range(12):
        state = state.process_ct()
        assert state.active_unit_id is None

    assert state.get_unit("k1").stats.ct == 96
    assert state.tick_count == 12

    state = state.process_ct()
    assert state.active_unit_id == "k1"
    assert state.get_unit("k1").stats.ct == 104
    assert state.tick_count == 12

def test_active_unit_blocks_scheduler(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1")).activate("k1")
    assert state.process_ct() is state

def test_charged_unit_activates_without_accumulating(battle_state, make_unit):
    unit = make_unit("k1").with_stats(ct=120)
    other = make_unit("m1", job=Job.MAGE, position=(1, 0))
    state = with_units(battle_state, unit, other)

    state = state.process_ct()

    assert state.active_unit_id == "k1"
    assert state.get_unit("k1").stats.ct == 120
    assert state.get_unit("m1").stats.ct == 0
    assert state.tick_count == 0

def test_highest_ct_wins(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("a").with_stats(ct=100),
        make_unit("b", position=(1, 0)).with_stats(ct=130),
    )
    assert state.process_ct().active_unit_id == "b"

def test_tie_goes_to_smallest_id(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("zeta").with_stats(ct=110),
        make_unit("alpha", position=(1, 0)).with_stats(ct=110),
    )
    assert state.ready_unit().id == "alpha"

def test_ready_unit_none(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1").with_stats(ct=CT_THRESHOLD - 1))
    assert state.ready_unit() is None

def test_custom_threshold(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1"))
    state = state.process_ct(threshold=8)
    assert state.active_unit_id == "k1"

def test_complete_turn(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1").with_stats(ct=104)).activate("k1")
    state = state.complete_turn("k1")

    assert state.active_unit_id is None
    assert state.turn_count == 1
    assert state.get_unit("k1").stats.ct == 0

def test_move_range_excludes_occupied(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("k1", position=(5, 5)),
        make_unit("e1", position=(6, 5), team_id=1),
    )
    cells = state.get_unit_move_range("k1")

    assert Position(6, 5) not in cells
    assert Position(5, 5) not in cells
    assert Position(4, 5) in cells

def test_move_range_when_walled_in(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1", position=(5, 5)))
    for cell in [(5, 4), (6, 5), (5, 6), (4, 5)]:
        state.map.set_tile_passable(cell, False)

    assert state.get_unit_move_range("k1") == []

def test_move_range_jump(battle_state, make_unit):
    state = battle_state.add_unit(make_unit("k1", position=(5, 5)))
    state.map.set_tile_height((6, 5), 3)

    assert Position(6, 5) not in state.get_unit_move_range("k1")
    assert Position(6, 5) in state.get_unit_move_range("k1", enforce_jump=False)

def test_move_range_unknown_unit(battle_state):
    assert battle_state.get_unit_move_range("ghost") == []

def test_find_path_through_own_cell_to_enemy(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("k1", position=(0, 0)),
        make_unit("e1", position=(3, 0), team_id=1),
        make_unit("a1", position=(1, 0)),
    )

    path = state.find_path(Position(0, 0), Position(3, 0))

    assert path[0] == Position(0, 0)
    assert path[-1] == Position(3, 0)
    assert Position(1, 0) not in path

def test_ct_grows_by_speed_for_every_unit(battle_state, make_unit):
    state = with_units(
        battle_state,
        make_unit("knight", job=Job.KNIGHT, position=(0, 0)),
        make_unit("rogue", job=Job.ROGUE, position=(1, 0)),
        make_unit("mage", job=Job.MAGE, position=(2, 0)).with_stats(ct=30),
    )

    for _ in range(3):
        after = state.process_ct()

        assert after.active_unit_id is None
        assert after.tick_count == state.tick_count + 1
        for unit in state.units:
            assert after.get_unit(unit.id).stats.ct == unit.stats.ct + unit.stats.spd
        state = after
