"""
Game events for UI hooks and logging.
Events describe what happened during action processing.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Phase/round events
PHASE_CHANGED = "phase_changed"
ROUND_STARTED = "round_started"
TURN_ORDER_SET = "turn_order_set"

# Betting and ledger events
BET_CHANGED = "bet_changed"
FUNDS_BORROWED = "funds_borrowed"
DEBT_REPAID = "debt_repaid"

# Turn events
DICE_ROLLED = "dice_rolled"
TURN_FINISHED = "turn_finished"

# Settlement events
PLAYER_SETTLED = "player_settled"
ROUND_SETTLED = "round_settled"
BANKER_ROTATED = "banker_rotated"


# ===== Event Factory Functions =====

def phase_changed(old_phase: str, new_phase: str, round_number: int) -> GameEvent:
    return GameEvent(PHASE_CHANGED, {
        "old_phase": old_phase,
        "new_phase": new_phase,
        "round_number": round_number,
    })


def round_started(round_number: int, banker_id: str) -> GameEvent:
    return GameEvent(ROUND_STARTED, {
        "round_number": round_number,
        "banker": banker_id,
    })


def turn_order_set(turn_order: list[str], bets: dict[str, int]) -> GameEvent:
    return GameEvent(TURN_ORDER_SET, {
        "turn_order": list(turn_order),
        "bets": bets,  # player_id -> committed bet
    })


def bet_changed(player_id: str, old_bet: int, new_bet: int, requested: Any) -> GameEvent:
    return GameEvent(BET_CHANGED, {
        "player": player_id,
        "old_bet": old_bet,
        "new_bet": new_bet,
        "requested": requested,  # Raw input, before normalization and clamping
    })


def funds_borrowed(player_id: str, amount: int, new_balance: int, new_debt: int) -> GameEvent:
    return GameEvent(FUNDS_BORROWED, {
        "player": player_id,
        "amount": amount,
        "balance": new_balance,
        "debt": new_debt,
    })


def debt_repaid(
    player_id: str,
    requested: Any,
    amount: int,
    new_balance: int,
    new_debt: int,
) -> GameEvent:
    return GameEvent(DEBT_REPAID, {
        "player": player_id,
        "requested": requested,
        "amount": amount,  # Actually repaid: min(requested, debt, balance)
        "balance": new_balance,
        "debt": new_debt,
    })


def dice_rolled(
    player_id: str,
    dice: list[int],
    off_table: bool,
    hand: dict[str, Any],
    roll_count: int,
    hand_final: bool,
) -> GameEvent:
    """Emitted for every authoritative throw. hand_final tells the UI the player must now finish."""
    return GameEvent(DICE_ROLLED, {
        "player": player_id,
        "dice": list(dice),
        "off_table": off_table,
        "hand": hand,
        "roll_count": roll_count,
        "hand_final": hand_final,
    })


def turn_finished(player_id: str, next_player_id: str | None) -> GameEvent:
    return GameEvent(TURN_FINISHED, {
        "player": player_id,
        "next_player": next_player_id,  # None when the banker just finished
    })


def player_settled(
    player_id: str,
    bet: int,
    hand_label: str,
    winner: str,
    multiplier: int,
    net: int,
) -> GameEvent:
    return GameEvent(PLAYER_SETTLED, {
        "player": player_id,
        "bet": bet,
        "hand": hand_label,
        "winner": winner,  # "banker" or "challenger"
        "multiplier": multiplier,
        "net": net,
    })


def round_settled(round_number: int, banker_id: str, banker_net: int, nets: dict[str, int]) -> GameEvent:
    """Emitted once per round after balances are updated. Sum of nets is always 0."""
    return GameEvent(ROUND_SETTLED, {
        "round_number": round_number,
        "banker": banker_id,
        "banker_net": banker_net,
        "nets": nets,  # player_id -> signed net, banker included
    })


def banker_rotated(old_banker_id: str, new_banker_id: str) -> GameEvent:
    return GameEvent(BANKER_ROTATED, {
        "old_banker": old_banker_id,
        "new_banker": new_banker_id,
    })
