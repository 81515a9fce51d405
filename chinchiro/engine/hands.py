"""
Hand classification.
Maps a three-die throw to a ranked hand category with its win/loss payout multipliers.
"""

from dataclasses import dataclass
from typing import Any

from chinchiro.engine import DICE_SIDES, DICE_PER_ROLL

# ===== Hand Categories =====

TRIPLE_ONES = "triple_ones"
TRIPLE = "triple"
HIGH_STRAIGHT = "high_straight"
POINT = "point"
NO_SCORE = "no_score"
HIFUMI = "hifumi"
OFF_TABLE = "off_table"

# Weakest first. Position in this tuple is the category's strength.
CATEGORY_ORDER = (
    OFF_TABLE,
    HIFUMI,
    NO_SCORE,
    POINT,
    HIGH_STRAIGHT,
    TRIPLE,
    TRIPLE_ONES,
)

# Categories whose tie_break value orders hands within the category
TIE_BREAK_CATEGORIES = (TRIPLE, POINT)

# category -> (win_multiplier, loss_multiplier)
HAND_MULTIPLIERS = {
    TRIPLE_ONES: (5, 1),
    TRIPLE: (3, 1),
    HIGH_STRAIGHT: (2, 1),
    POINT: (1, 1),
    NO_SCORE: (1, 1),
    HIFUMI: (1, 2),
    OFF_TABLE: (1, 1),
}


def category_strength(category: str) -> int:
    """Strength of a category; higher is stronger."""
    if category not in CATEGORY_ORDER:
        raise ValueError(f"Unknown hand category: {category}")
    return CATEGORY_ORDER.index(category)


@dataclass
class Hand:
    """A classified throw."""
    category: str
    tie_break: int  # Repeated face for triples, unpaired face for points, 0 otherwise
    win_multiplier: int  # Payout multiplier when this hand wins
    loss_multiplier: int  # Payout multiplier when this hand loses
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "tie_break": self.tie_break,
            "win_multiplier": self.win_multiplier,
            "loss_multiplier": self.loss_multiplier,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hand":
        if not isinstance(data, dict):
            data = {}
        category = str(data.get("category") or NO_SCORE)
        if category not in HAND_MULTIPLIERS:
            category = NO_SCORE
        try:
            tie_break = int(data.get("tie_break") or 0)
        except (TypeError, ValueError):
            tie_break = 0
        # Multipliers come from the rule table, never from the payload
        return _make_hand(category, tie_break, str(data.get("label") or ""))


def _make_hand(category: str, tie_break: int = 0, label: str = "") -> Hand:
    win, loss = HAND_MULTIPLIERS[category]
    return Hand(
        category=category,
        tie_break=tie_break if category in TIE_BREAK_CATEGORIES else 0,
        win_multiplier=win,
        loss_multiplier=loss,
        label=label or hand_label(category, tie_break),
    )


def hand_label(category: str, tie_break: int = 0) -> str:
    """Display label for a hand."""
    if category == TRIPLE_ONES:
        return "Triple Ones (5x)"
    if category == TRIPLE:
        return f"Triple {tie_break}s (3x)"
    if category == HIGH_STRAIGHT:
        return "4-5-6 (2x win)"
    if category == POINT:
        return f"Point {tie_break}"
    if category == HIFUMI:
        return "1-2-3 (2x loss)"
    if category == OFF_TABLE:
        return "Off table"
    return "No score"


def validate_dice(dice: Any) -> list[int]:
    """Return dice as a list of ints, raising ValueError if it is not a legal throw."""
    if not isinstance(dice, (list, tuple)) or len(dice) != DICE_PER_ROLL:
        raise ValueError(f"A throw must have exactly {DICE_PER_ROLL} dice, got {dice!r}")
    faces = []
    for face in dice:
        if isinstance(face, bool) or not isinstance(face, int):
            raise ValueError(f"Die face must be an integer, got {face!r}")
        if not 1 <= face <= DICE_SIDES:
            raise ValueError(f"Die face {face} out of range 1-{DICE_SIDES}")
        faces.append(face)
    return faces


def classify(dice: list[int] | tuple[int, int, int]) -> Hand:
    """
    Classify a throw. Total over all legal throws and independent of dice order.

    Checked strongest first: Triple-Ones, Triple, High-Straight, Hifumi, Point, else No-Score.
    """
    d1, d2, d3 = sorted(validate_dice(dice))

    if d1 == d2 == d3 == 1:
        return _make_hand(TRIPLE_ONES)

    if d1 == d2 == d3:
        return _make_hand(TRIPLE, d1)

    if (d1, d2, d3) == (4, 5, 6):
        return _make_hand(HIGH_STRAIGHT)

    if (d1, d2, d3) == (1, 2, 3):
        return _make_hand(HIFUMI)

    # Sorted, so a pair is always adjacent
    if d1 == d2:
        return _make_hand(POINT, d3)
    if d2 == d3:
        return _make_hand(POINT, d1)

    return _make_hand(NO_SCORE)


def off_table_hand() -> Hand:
    """The forced Off-Table hand. Independent of any dice."""
    return _make_hand(OFF_TABLE)


def no_score_hand() -> Hand:
    """The weakest ordinary hand, used when a player reaches settlement without one."""
    return _make_hand(NO_SCORE)
