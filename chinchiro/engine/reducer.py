"""
Main game reducer.
Applies actions to state, enforcing rules and producing new state.
Returns (new_state, events) where events describe what happened.
The input state is never modified.
"""

from chinchiro.engine.state import GameState, PHASE_BETTING, PHASE_ACTING, PHASE_RESULT
from chinchiro.engine.actions import Action
from chinchiro.engine.hands import validate_dice
from chinchiro.engine import ledger
from chinchiro.engine.turns import (
    apply_roll,
    build_turn_order,
    can_roll,
    current_player_id,
    finish_turn,
    is_hand_final,
)
from chinchiro.engine.settlement import settle_round, start_next_round
from chinchiro.engine.events import (
    GameEvent,
    phase_changed,
    turn_order_set,
    bet_changed,
    funds_borrowed,
    debt_repaid,
    dice_rolled,
    turn_finished,
)


# Phase rules: which action types are allowed in which phases
PHASE_ALLOWED_ACTIONS = {
    PHASE_BETTING: ["set_bet", "add_bet", "borrow", "repay", "confirm_bets"],
    PHASE_ACTING: ["roll", "finish_turn"],
    PHASE_RESULT: ["next_round"],
}

# Actions that must name a seated player
PLAYER_ACTIONS = ("set_bet", "add_bet", "borrow", "repay", "roll", "finish_turn")


def check_action(state: GameState, action: Action) -> None:
    """
    Raise ValueError if the action cannot be applied to this state.

    Validates:
    - Action is allowed in the current phase
    - The acting player is seated
    - Only challengers bet
    - Every challenger has a positive bet before play starts
    - Only the active player rolls or finishes, and only when the turn state allows it
    """
    phase = state.phase
    allowed_actions = PHASE_ALLOWED_ACTIONS.get(phase, [])

    if action.type not in allowed_actions:
        raise ValueError(
            f"Action '{action.type}' is not allowed in phase '{phase}'. "
            f"Allowed actions: {', '.join(allowed_actions)}"
        )

    if action.type == "confirm_bets":
        unbet = [p.name for p in state.challengers if p.bet <= 0]
        if unbet:
            raise ValueError(f"Every challenger must bet before play starts: {', '.join(unbet)}")

    if action.type not in PLAYER_ACTIONS:
        return

    player = state.get_player(action.player)

    if action.type in ("set_bet", "add_bet") and player.is_banker:
        raise ValueError(f"{player.name} is the banker and does not bet")

    if action.type in ("roll", "finish_turn"):
        active = current_player_id(state)
        if action.player != active:
            raise ValueError(
                f"Action player {action.player} does not match active player {active}")

    if action.type == "roll":
        if not can_roll(player):
            raise ValueError(f"{player.name} cannot roll again this turn")
        validate_dice(action.payload.get("dice"))
        if not isinstance(action.payload.get("off_table", False), bool):
            raise ValueError(f"off_table must be a boolean, got {action.payload.get('off_table')!r}")

    if action.type == "finish_turn" and not is_hand_final(player):
        raise ValueError(f"{player.name} must roll until the hand is final before finishing")


def apply_action(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    Args:
        state: Current game state
        action: Action to apply

    Returns:
        Tuple of (new_state, events) where events describe what happened
    """
    check_action(state, action)

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type == "set_bet":
        new_state, evts = _handle_bet(new_state, action, add=False)
        events.extend(evts)

    elif action.type == "add_bet":
        new_state, evts = _handle_bet(new_state, action, add=True)
        events.extend(evts)

    elif action.type == "borrow":
        new_state, evts = _handle_borrow(new_state, action)
        events.extend(evts)

    elif action.type == "repay":
        new_state, evts = _handle_repay(new_state, action)
        events.extend(evts)

    elif action.type == "confirm_bets":
        new_state, evts = _handle_confirm_bets(new_state)
        events.extend(evts)

    elif action.type == "roll":
        new_state, evts = _handle_roll(new_state, action)
        events.extend(evts)

    elif action.type == "finish_turn":
        new_state, evts = _handle_finish_turn(new_state, action)
        events.extend(evts)

    elif action.type == "next_round":
        events.extend(start_next_round(new_state))

    else:
        raise ValueError(f"Unknown action type: {action.type}")

    return new_state, events


def _handle_bet(
    state: GameState,
    action: Action,
    add: bool,
) -> tuple[GameState, list[GameEvent]]:
    player = state.get_player(action.player)
    requested = action.payload.get("amount")
    old_bet = player.bet
    if add:
        ledger.add_bet(player, requested)
    else:
        ledger.set_bet(player, requested)
    return state, [bet_changed(player.player_id, old_bet, player.bet, requested)]


def _handle_borrow(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    player = state.get_player(action.player)
    amount = ledger.borrow(player, action.payload.get("amount"))
    if amount <= 0:
        return state, []
    return state, [funds_borrowed(player.player_id, amount, player.balance, player.debt)]


def _handle_repay(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """Repay debt. A repayment that comes to nothing leaves state untouched and emits nothing."""
    player = state.get_player(action.player)
    requested = action.payload.get("amount")
    old_bet = player.bet
    amount = ledger.repay(player, requested)
    if amount <= 0:
        return state, []
    events = [debt_repaid(player.player_id, requested, amount, player.balance, player.debt)]
    if player.bet != old_bet:
        events.append(bet_changed(player.player_id, old_bet, player.bet, old_bet))
    return state, events


def _handle_confirm_bets(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """
    Close betting.
    - Clears any roll state left on players
    - Orders challengers by ascending bet with the banker last
    """
    events: list[GameEvent] = []

    for player in state.players:
        player.roll_count = 0
        player.hand = None
        player.turn_finished = False

    banker = state.banker
    state.turn_order = build_turn_order(state.players, banker.player_id)
    state.current_turn_index = 0
    events.append(turn_order_set(
        state.turn_order,
        {p.player_id: p.bet for p in state.challengers},
    ))

    old_phase = state.phase
    state.phase = PHASE_ACTING
    events.append(phase_changed(old_phase, state.phase, state.round_number))
    return state, events


def _handle_roll(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    player = state.get_player(action.player)
    off_table = action.payload.get("off_table", False)
    hand = apply_roll(player, action.payload.get("dice"), off_table)
    return state, [dice_rolled(
        player.player_id,
        player.dice,
        off_table,
        hand.to_dict(),
        player.roll_count,
        is_hand_final(player),
    )]


def _handle_finish_turn(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """
    Finish the active player's turn and advance.
    The banker acts last, so the banker finishing settles the round.
    """
    events: list[GameEvent] = []
    player = state.get_player(action.player)
    finish_turn(player)

    is_last = state.current_turn_index == len(state.turn_order) - 1
    if is_last:
        events.append(turn_finished(player.player_id, None))
        events.extend(settle_round(state))
        return state, events

    state.current_turn_index += 1
    events.append(turn_finished(player.player_id, current_player_id(state)))
    return state, events


def replay_from_actions(
    initial_state: GameState,
    actions: list[Action],
) -> tuple[GameState, list[GameEvent]]:
    """
    Replay a series of actions from an initial state.
    Event sourcing: state is derived from action log.

    Args:
        initial_state: Starting game state
        actions: List of actions to apply in sequence

    Returns:
        Tuple of (final_state, all_events) after all actions applied
    """
    current_state = initial_state.copy()
    all_events: list[GameEvent] = []

    for action in actions:
        current_state, events = apply_action(current_state, action)
        all_events.extend(events)

    return current_state, all_events
