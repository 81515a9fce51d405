"""
Credit ledger and bet management.
Top-ups create tracked debt; repayment is bounded by both the debt and the balance.
Player input is normalized rather than rejected: bad numbers become 0, bets are clamped.
"""

import math
from typing import Any

from chinchiro.engine.state import Player


def parse_amount(value: Any) -> int:
    """
    Normalize a numeric input to an int.
    Unparseable text, None, NaN and infinities become 0. Fractions truncate toward zero.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def clamp_bet(amount: int, balance: int) -> int:
    """Clamp a bet into [0, balance]."""
    return max(0, min(balance, amount))


def set_bet(player: Player, amount: Any) -> int:
    """Set the player's bet, clamped to [0, balance]. Returns the new bet."""
    player.bet = clamp_bet(parse_amount(amount), player.balance)
    return player.bet


def add_bet(player: Player, delta: Any) -> int:
    """
    Add to the player's bet, then clamp the resulting total to [0, balance].
    The cap is the full balance, not the balance left after the current bet.
    """
    player.bet = clamp_bet(player.bet + parse_amount(delta), player.balance)
    return player.bet


def borrow(player: Player, amount: Any) -> int:
    """
    Top up the player's balance with house credit; the same amount is added to debt.
    No borrowing limit. Non-positive amounts are ignored. Returns the amount borrowed.
    """
    amount = parse_amount(amount)
    if amount <= 0:
        return 0
    player.balance += amount
    player.debt += amount
    return amount


def repay(player: Player, requested: Any) -> int:
    """
    Repay debt out of balance: min(requested, debt, balance).
    Nothing changes when that is not positive. Returns the amount actually repaid.
    """
    actual = min(parse_amount(requested), player.debt, player.balance)
    if actual <= 0:
        return 0
    player.balance -= actual
    player.debt -= actual
    # Keep bet <= balance after the balance shrinks
    player.bet = clamp_bet(player.bet, player.balance)
    return actual
