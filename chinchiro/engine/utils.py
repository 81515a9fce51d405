"""
Utility functions for the game engine.
"""

from chinchiro.engine.state import GameState, Player, PHASE_BETTING
from chinchiro.engine.definitions import SessionConfig
from chinchiro.engine.turns import current_player_id


def initialize_game_state(config: SessionConfig | None = None) -> GameState:
    """
    Seat the players and open betting for round 1.
    Seat 0 is the first banker; every player starts with the configured balance and no debt.
    """
    if config is None:
        config = SessionConfig()
    config.validate()

    players = [
        Player(
            player_id=f"p-{idx}",
            name=name,
            balance=config.starting_balance,
            is_banker=idx == 0,
        )
        for idx, name in enumerate(config.player_names)
    ]
    return GameState(
        phase=PHASE_BETTING,
        players=players,
        banker_index=0,
        off_table_probability=config.off_table_probability,
    )


def print_game_state(state: GameState) -> None:
    """Print a readable snapshot of the table."""
    print(f"\n{'='*60}")
    print(f"ROUND {state.round_number} | Phase: {state.phase.upper()} | Banker: {state.banker.name}")
    print(f"{'='*60}")

    active = current_player_id(state)
    for player in state.players:
        marker = ">" if player.player_id == active else " "
        role = "B" if player.is_banker else " "
        hand = player.hand.label if player.hand else "-"
        print(
            f"{marker}{role} {player.name:<12} bal={player.balance:>7} debt={player.debt:>6} "
            f"bet={player.bet:>6} dice={player.dice} rolls={player.roll_count} hand={hand}"
        )
    if state.turn_order:
        names = [state.get_player(pid).name for pid in state.turn_order]
        print(f"Turn order: {' -> '.join(names)}")
    print()


def print_round_summary(state: GameState) -> None:
    """Print the settled result of the current round."""
    from chinchiro.engine.queries import get_round_summary

    summary = get_round_summary(state)
    print(f"\n{'='*60}")
    print(f"RESULT - ROUND {summary['round_number']}")
    print(f"{'='*60}")
    for row in summary["players"]:
        role = "(banker)" if row["is_banker"] else ""
        print(
            f"{row['name']:<12}{role:<9} {row['hand']:<18} bet={row['bet']:>6} "
            f"net={row['net_result']:>+7} balance={row['balance']:>7}"
        )
    print()
