"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from chinchiro.engine.state import GameState, PHASE_BETTING, PHASE_ACTING, PHASE_RESULT
from chinchiro.engine.actions import Action
from chinchiro.engine.reducer import check_action
from chinchiro.engine.turns import can_roll, current_player_id, is_hand_final, turn_status


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Action Validation =====

def validate_action(state: GameState, action: Action) -> ValidationResult:
    """
    Validate an action without applying it.
    Returns ValidationResult with valid=True or valid=False with error message.
    """
    try:
        check_action(state, action)
    except ValueError as e:
        return ValidationResult(False, str(e))
    return ValidationResult(True)


# ===== Available Actions =====

def get_available_actions(state: GameState) -> dict[str, Any]:
    """
    What can be done right now.

    Betting: every player can borrow/repay; challengers can bet; the table can confirm
    once every challenger has a positive bet.
    Acting: only the active player, who can either roll or finish.
    Result: the table can start the next round.
    """
    out: dict[str, Any] = {
        "phase": state.phase,
        "round_number": state.round_number,
        "banker": state.banker.player_id,
        "current_player": current_player_id(state),
        "actions": [],
    }

    if state.phase == PHASE_BETTING:
        players = []
        for player in state.players:
            actions = ["borrow"]
            if player.debt > 0 and player.balance > 0:
                actions.append("repay")
            if not player.is_banker:
                actions.extend(["set_bet", "add_bet"])
            players.append({
                "player_id": player.player_id,
                "actions": actions,
                "max_bet": 0 if player.is_banker else max(0, player.balance),
                "max_repay": max(0, min(player.debt, player.balance)),
            })
        out["players"] = players
        # Play cannot start while a challenger has nothing staked
        if all(p.bet > 0 for p in state.challengers):
            out["actions"] = ["confirm_bets"]

    elif state.phase == PHASE_ACTING:
        active_id = current_player_id(state)
        if active_id is not None:
            player = state.get_player(active_id)
            actions = []
            if can_roll(player):
                actions.append("roll")
            if is_hand_final(player):
                actions.append("finish_turn")
            out["actions"] = actions
            out["roll_count"] = player.roll_count
            out["turn_status"] = turn_status(player)

    elif state.phase == PHASE_RESULT:
        out["actions"] = ["next_round"]

    return out


# ===== Round Summary =====

def get_round_summary(state: GameState) -> dict[str, Any]:
    """
    Per-player outputs for the presentation layer: hand label, committed bet,
    signed net result and resulting balance.
    """
    rows = []
    for player in state.players:
        rows.append({
            "player_id": player.player_id,
            "name": player.name,
            "is_banker": player.is_banker,
            "hand": player.hand.label if player.hand else "-",
            "bet": player.bet,
            "net_result": player.net_result,
            "balance": player.balance,
            "debt": player.debt,
        })
    return {
        "round_number": state.round_number,
        "phase": state.phase,
        "settled": state.phase == PHASE_RESULT,
        "players": rows,
    }
