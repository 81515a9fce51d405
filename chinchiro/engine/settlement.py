"""
Round settlement.
Resolves every challenger against the banker, gives the banker the negated sum
(settlement is zero-sum), and rotates the banker for the next round.
"""

from chinchiro.engine.hands import no_score_hand
from chinchiro.engine.outcome import resolve_outcome
from chinchiro.engine.state import GameState, Player, PHASE_BETTING, PHASE_RESULT
from chinchiro.engine.turns import all_turns_finished
from chinchiro.engine.events import (
    GameEvent,
    phase_changed,
    player_settled,
    round_settled,
    round_started,
    banker_rotated,
)


def settle_round(state: GameState) -> list[GameEvent]:
    """
    Apply the round's results to every balance and move to the result phase.
    Mutates state in place; the reducer hands it a copy.
    """
    if not all_turns_finished(state):
        raise ValueError("Cannot settle: not every player has finished their turn")

    events: list[GameEvent] = []
    banker = state.banker
    # A missing hand should not happen after finished turns; fall back to No-Score
    banker_hand = banker.hand or no_score_hand()

    nets: dict[str, int] = {}
    banker_net = 0
    for player in state.challengers:
        hand = player.hand or no_score_hand()
        outcome = resolve_outcome(banker_hand, hand, player.bet)
        player.net_result = outcome.amount
        banker_net -= outcome.amount
        nets[player.player_id] = outcome.amount
        events.append(player_settled(
            player.player_id,
            player.bet,
            hand.label,
            outcome.winner,
            outcome.multiplier,
            outcome.amount,
        ))

    banker.net_result = banker_net
    nets[banker.player_id] = banker_net

    for player in state.players:
        player.balance += player.net_result

    events.append(round_settled(state.round_number, banker.player_id, banker_net, nets))

    old_phase = state.phase
    state.phase = PHASE_RESULT
    events.append(phase_changed(old_phase, state.phase, state.round_number))
    return events


def reset_round_fields(player: Player) -> None:
    """Clear everything that only lives for one round. Balance and debt carry over."""
    player.bet = 0
    player.dice = [1, 1, 1]
    player.hand = None
    player.roll_count = 0
    player.turn_finished = False
    player.net_result = 0


def rotate_banker(state: GameState) -> int:
    """Pass the banker role to the next seat, wrapping. Returns the new banker index."""
    next_index = (state.banker_index + 1) % len(state.players)
    for i, player in enumerate(state.players):
        player.is_banker = i == next_index
    state.banker_index = next_index
    return next_index


def start_next_round(state: GameState) -> list[GameEvent]:
    """Rotate the banker, reset per-round fields and reopen betting."""
    events: list[GameEvent] = []
    old_banker_id = state.banker.player_id

    rotate_banker(state)
    events.append(banker_rotated(old_banker_id, state.banker.player_id))

    for player in state.players:
        reset_round_fields(player)
    state.turn_order = []
    state.current_turn_index = 0
    state.round_number += 1

    old_phase = state.phase
    state.phase = PHASE_BETTING
    events.append(phase_changed(old_phase, state.phase, state.round_number))
    events.append(round_started(state.round_number, state.banker.player_id))
    return events
