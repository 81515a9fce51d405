"""
Outcome resolution.
Compares a banker hand with a challenger hand and computes the signed payout for a bet.
Ties go to the banker. Pure functions: no state, no randomness.
"""

from dataclasses import dataclass
from typing import Any

from chinchiro.engine.hands import Hand, TIE_BREAK_CATEGORIES, category_strength

BANKER = "banker"
CHALLENGER = "challenger"


@dataclass
class Outcome:
    """Result of one challenger-vs-banker comparison."""
    winner: str  # BANKER or CHALLENGER
    multiplier: int
    amount: int  # Signed: positive = banker pays challenger, negative = challenger pays banker

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner,
            "multiplier": self.multiplier,
            "amount": self.amount,
        }


def hand_rank(hand: Hand) -> tuple[int, int]:
    """
    Comparison key for a hand.
    Category strength first; the tie-break face only separates hands of the same category.
    """
    strength = category_strength(hand.category)
    if hand.category in TIE_BREAK_CATEGORIES:
        return (strength, hand.tie_break)
    return (strength, 0)


def banker_wins(banker_hand: Hand, challenger_hand: Hand) -> bool:
    """True when the banker's hand is at least as strong as the challenger's."""
    return hand_rank(banker_hand) >= hand_rank(challenger_hand)


def payout_multiplier(winner_hand: Hand, loser_hand: Hand) -> int:
    """
    The larger of the winner's win multiplier and the loser's loss multiplier.
    A punitive loss multiplier (Hifumi) applies even when the winner's own multiplier is 1.
    """
    return max(winner_hand.win_multiplier, loser_hand.loss_multiplier)


def resolve_outcome(banker_hand: Hand, challenger_hand: Hand, bet: int) -> Outcome:
    """Resolve a challenger's hand against the banker's for the given bet."""
    if banker_wins(banker_hand, challenger_hand):
        multiplier = payout_multiplier(banker_hand, challenger_hand)
        return Outcome(winner=BANKER, multiplier=multiplier, amount=-(bet * multiplier))

    multiplier = payout_multiplier(challenger_hand, banker_hand)
    return Outcome(winner=CHALLENGER, multiplier=multiplier, amount=bet * multiplier)


def resolve(banker_hand: Hand, challenger_hand: Hand, bet: int) -> int:
    """Signed amount the challenger receives (negative when the challenger pays)."""
    return resolve_outcome(banker_hand, challenger_hand, bet).amount
