"""
Turn sequencing.
Per-player roll state machine (AwaitingFirstRoll -> HasHand -> TurnComplete)
and turn-order construction for a round.
"""

from chinchiro.engine import MAX_ROLLS
from chinchiro.engine.hands import Hand, NO_SCORE, classify, off_table_hand, validate_dice
from chinchiro.engine.state import GameState, Player, PHASE_ACTING

AWAITING_FIRST_ROLL = "awaiting_first_roll"
HAS_HAND = "has_hand"
TURN_COMPLETE = "turn_complete"


def turn_status(player: Player) -> str:
    """Where the player is in the roll state machine."""
    if player.turn_finished:
        return TURN_COMPLETE
    if player.hand is None:
        return AWAITING_FIRST_ROLL
    return HAS_HAND


def can_roll(player: Player) -> bool:
    """
    A player may roll while they have no hand, or while they hold No-Score with rolls left.
    Any other hand, or No-Score after the last roll, is final.
    """
    if player.turn_finished:
        return False
    if player.hand is None:
        return True
    return player.hand.category == NO_SCORE and player.roll_count < MAX_ROLLS


def is_hand_final(player: Player) -> bool:
    """True once the player holds a hand they can no longer improve."""
    return player.hand is not None and not can_roll(player)


def apply_roll(player: Player, dice: list[int], off_table: bool = False) -> Hand:
    """
    Record one throw for the player.
    The Off-Table override replaces the classified hand regardless of the dice.
    roll_count increases on every throw.
    """
    if not can_roll(player):
        raise ValueError(
            f"{player.name} cannot roll: hand is final after {player.roll_count} roll(s)")

    faces = validate_dice(dice)
    hand = off_table_hand() if off_table else classify(faces)

    player.dice = faces
    player.hand = hand
    player.roll_count += 1
    return hand


def finish_turn(player: Player) -> None:
    """Close the player's turn. Only allowed once the hand is final."""
    if player.turn_finished:
        raise ValueError(f"{player.name} has already finished their turn")
    if not is_hand_final(player):
        raise ValueError(f"{player.name} cannot finish the turn before the hand is final")
    player.turn_finished = True


def build_turn_order(players: list[Player], banker_id: str) -> list[str]:
    """
    Acting order for a round: challengers by ascending bet, banker last.
    sorted() is stable, so equal bets keep registration order.
    """
    ids = [p.player_id for p in players]
    if banker_id not in ids:
        raise ValueError(f"Banker {banker_id} is not seated")
    challengers = [p for p in players if p.player_id != banker_id]
    ordered = sorted(challengers, key=lambda p: p.bet)
    return [p.player_id for p in ordered] + [banker_id]


def current_player_id(state: GameState) -> str | None:
    """Id of the player whose turn is active, or None outside the acting phase."""
    if state.phase != PHASE_ACTING:
        return None
    if not 0 <= state.current_turn_index < len(state.turn_order):
        return None
    return state.turn_order[state.current_turn_index]


def all_turns_finished(state: GameState) -> bool:
    """True when every player in the turn order has finished."""
    if len(state.turn_order) != len(state.players):
        return False
    return all(state.get_player(pid).turn_finished for pid in state.turn_order)
