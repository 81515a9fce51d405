"""
Main entry point for the Chinchiro Round-Settlement Engine.
Demonstrates core functionality by playing a few rounds at a three-seat table.
"""

import random

from chinchiro.engine.definitions import SessionConfig
from chinchiro.engine.actions import (
    set_bet,
    borrow,
    repay,
    confirm_bets,
    roll,
    finish_turn,
    next_round,
)
from chinchiro.engine.dice import generate_roll
from chinchiro.engine.reducer import apply_action
from chinchiro.engine.turns import can_roll, current_player_id
from chinchiro.engine.utils import (
    initialize_game_state,
    print_game_state,
    print_round_summary,
)


def play_turns(state, rng):
    """Roll for every player in turn order until each hand is final, then finish."""
    while True:
        player_id = current_player_id(state)
        if player_id is None:
            return state
        while can_roll(state.get_player(player_id)):
            throw = generate_roll(rng, state.off_table_probability)
            state, events = apply_action(state, roll(player_id, throw["dice"], throw["off_table"]))
            rolled = events[0].payload
            print(f"  {state.get_player(player_id).name} rolls {rolled['dice']} -> {rolled['hand']['label']}")
        state, _ = apply_action(state, finish_turn(player_id))


def main():
    print("Chinchiro Round-Settlement Engine")
    print("=" * 60)

    rng = random.Random(2024)
    config = SessionConfig(starting_balance=20000, player_names=["Aki", "Ren", "Sora"])
    state = initialize_game_state(config)

    print("\n[INITIAL STATE]")
    print_game_state(state)

    # ===== SCENARIO 1: Top-up before betting =====
    print("\n[SCENARIO 1: Top-up and Repay]")
    state, events = apply_action(state, borrow("p-2", 10000))
    print(f"✓ Sora borrows 10000. Events: {[e.type for e in events]}")
    state, events = apply_action(state, repay("p-2", 4000))
    sora = state.get_player("p-2")
    print(f"✓ Sora repays 4000. balance={sora.balance} debt={sora.debt}")

    # ===== SCENARIO 2: Three rounds with a rotating banker =====
    for _round in range(3):
        print(f"\n[ROUND {state.round_number}: banker is {state.banker.name}]")
        for player in state.challengers:
            bet = rng.choice([500, 1000, 2000, 3000])
            if player.balance < bet:
                state, _ = apply_action(state, borrow(player.player_id, bet - player.balance))
                print(f"✓ {player.name} borrows to cover a {bet} bet")
            state, _ = apply_action(state, set_bet(player.player_id, bet))
        state, _ = apply_action(state, confirm_bets())
        print(f"Turn order: {[state.get_player(pid).name for pid in state.turn_order]}")

        state = play_turns(state, rng)
        print_round_summary(state)

        total = sum(p.net_result for p in state.players)
        print(f"Zero-sum check: {total}")

        state, _ = apply_action(state, next_round())

    print("\n[FINAL STATE]")
    print_game_state(state)


if __name__ == "__main__":
    main()
