"""
Turn sequencing: the per-player roll state machine and turn-order construction.
"""

import random

import pytest

from chinchiro.engine.dice import generate_roll, roll_die, roll_is_off_table, roll_triple
from chinchiro.engine.hands import NO_SCORE, OFF_TABLE, POINT
from chinchiro.engine.state import Player
from chinchiro.engine.turns import (
    AWAITING_FIRST_ROLL,
    HAS_HAND,
    TURN_COMPLETE,
    apply_roll,
    build_turn_order,
    can_roll,
    finish_turn,
    is_hand_final,
    turn_status,
)


def create_player(idx: int, bet: int = 0, balance: int = 10000, is_banker: bool = False) -> Player:
    """Helper to seat a player with an id matching its registration order."""
    return Player(player_id=f"p-{idx}", name=f"Player {idx + 1}", balance=balance, bet=bet, is_banker=is_banker)


def test_fresh_player_can_roll():
    player = create_player(0)
    assert turn_status(player) == AWAITING_FIRST_ROLL
    assert can_roll(player)
    assert not is_hand_final(player)


def test_no_score_allows_three_rolls_then_stops():
    player = create_player(0)
    for expected_count in (1, 2, 3):
        hand = apply_roll(player, [1, 2, 4])
        assert hand.category == NO_SCORE
        assert player.roll_count == expected_count

    assert not can_roll(player)
    assert is_hand_final(player)
    with pytest.raises(ValueError):
        apply_roll(player, [2, 2, 3])


def test_scoring_hand_is_final_immediately():
    player = create_player(0)
    hand = apply_roll(player, [3, 3, 5])
    assert hand.category == POINT
    assert turn_status(player) == HAS_HAND
    assert not can_roll(player)
    assert player.roll_count == 1


def test_no_score_then_point_stops_rolling():
    player = create_player(0)
    apply_roll(player, [2, 3, 6])
    assert can_roll(player)
    apply_roll(player, [6, 6, 1])
    assert not can_roll(player)
    assert player.roll_count == 2
    assert player.dice == [6, 6, 1]


def test_off_table_overrides_dice_and_counts_as_roll():
    player = create_player(0)
    hand = apply_roll(player, [1, 1, 1], off_table=True)
    assert hand.category == OFF_TABLE
    assert player.roll_count == 1
    assert player.dice == [1, 1, 1]
    assert is_hand_final(player)


def test_finish_turn_requires_final_hand():
    player = create_player(0)
    with pytest.raises(ValueError):
        finish_turn(player)

    apply_roll(player, [1, 3, 5])
    with pytest.raises(ValueError):
        finish_turn(player)

    apply_roll(player, [4, 5, 6])
    finish_turn(player)
    assert turn_status(player) == TURN_COMPLETE
    assert not can_roll(player)

    with pytest.raises(ValueError):
        finish_turn(player)


def test_turn_order_ascending_bets_banker_last():
    players = [
        create_player(0, is_banker=True),
        create_player(1, bet=500),
        create_player(2, bet=100),
        create_player(3, bet=300),
    ]
    assert build_turn_order(players, "p-0") == ["p-2", "p-3", "p-1", "p-0"]


def test_turn_order_ties_keep_registration_order():
    players = [
        create_player(0, bet=200),
        create_player(1, bet=100),
        create_player(2, is_banker=True),
        create_player(3, bet=200),
        create_player(4, bet=100),
    ]
    order = build_turn_order(players, "p-2")
    assert order == ["p-1", "p-4", "p-0", "p-3", "p-2"]
    assert sorted(order) == sorted(p.player_id for p in players)


def test_turn_order_unknown_banker():
    with pytest.raises(ValueError):
        build_turn_order([create_player(0), create_player(1)], "p-9")


def test_dice_are_in_range_and_seeded_rolls_repeat():
    rng = random.Random(7)
    faces = {roll_die(rng) for _ in range(500)}
    assert faces == {1, 2, 3, 4, 5, 6}
    assert len(roll_triple(rng)) == 3

    assert generate_roll(seed=42) == generate_roll(seed=42)


def test_off_table_probability_bounds():
    rng = random.Random(3)
    assert not any(roll_is_off_table(rng, 0.0) for _ in range(200))
    assert all(roll_is_off_table(rng, 1.0) for _ in range(200))
    assert generate_roll(rng, off_table_probability=1.0)["off_table"] is True
