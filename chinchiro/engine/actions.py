"""
Action definitions for the game.
Actions are immutable, deterministic instructions. Dice are rolled before the action
is built, so applying an action never draws random numbers.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Action:
    """Base action class. All actions have a type, acting player, and payload."""
    type: str  # e.g., "set_bet", "roll", "finish_turn", "next_round"
    player: str | None  # player_id performing the action; None for table-level actions
    payload: dict = field(default_factory=dict)  # Action-specific data


def set_bet(player: str, amount: Any) -> Action:
    """
    Set a challenger's bet. The amount may be raw input text; it is normalized and
    clamped to [0, balance] when applied.
    Example: set_bet("p-1", "1500")
    """
    return Action(type="set_bet", player=player, payload={"amount": amount})


def add_bet(player: str, amount: Any) -> Action:
    """Add to a challenger's bet. The total is clamped to [0, balance]."""
    return Action(type="add_bet", player=player, payload={"amount": amount})


def borrow(player: str, amount: Any) -> Action:
    """Top up a player's balance with house credit, creating the same amount of debt."""
    return Action(type="borrow", player=player, payload={"amount": amount})


def repay(player: str, amount: Any) -> Action:
    """Repay up to amount of a player's debt, bounded by debt and balance."""
    return Action(type="repay", player=player, payload={"amount": amount})


def confirm_bets() -> Action:
    """Close betting, build the turn order and start the acting phase."""
    return Action(type="confirm_bets", player=None, payload={})


def roll(player: str, dice: list[int], off_table: bool = False) -> Action:
    """
    Record one authoritative throw for the active player.
    dice must be provided (deterministic, no RNG in reducer); see dice.generate_roll.
    off_table forces the Off-Table hand whatever the dice show.

    Example: roll("p-1", [2, 2, 5])
    """
    return Action(
        type="roll",
        player=player,
        payload={"dice": list(dice), "off_table": bool(off_table)},
    )


def finish_turn(player: str) -> Action:
    """
    End the active player's turn once their hand is final.
    When the banker (last in turn order) finishes, the round is settled.
    """
    return Action(type="finish_turn", player=player, payload={})


def next_round() -> Action:
    """Rotate the banker and reopen betting. Only valid after settlement."""
    return Action(type="next_round", player=None, payload={})
