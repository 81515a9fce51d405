"""
Die rolling for the engine.
Randomness lives only here; the reducer receives already-rolled dice in the roll action.
"""

import random

from chinchiro.engine import DICE_SIDES, DICE_PER_ROLL, OFF_TABLE_PROBABILITY


def roll_die(rng: random.Random | None = None) -> int:
    """Roll one die, uniform over 1..DICE_SIDES."""
    source = rng if rng is not None else random
    return source.randint(1, DICE_SIDES)


def roll_triple(rng: random.Random | None = None) -> list[int]:
    """Roll the three dice of a single throw."""
    return [roll_die(rng) for _ in range(DICE_PER_ROLL)]


def roll_is_off_table(
    rng: random.Random | None = None,
    probability: float = OFF_TABLE_PROBABILITY,
) -> bool:
    """Bernoulli sample for the Off-Table override."""
    if probability <= 0:
        return False
    source = rng if rng is not None else random
    return source.random() < probability


def generate_roll(
    rng: random.Random | None = None,
    off_table_probability: float = OFF_TABLE_PROBABILITY,
    seed: int | None = None,
) -> dict:
    """
    Produce one authoritative throw as a roll action payload.

    The override decision is sampled first and is independent of the dice; the dice are
    still rolled so the UI has faces to show.

    Args:
        rng: Random source; None uses the module-level random functions
        off_table_probability: Chance the throw is forced Off-Table
        seed: Optional seed for reproducibility (builds a private Random)

    Returns:
        {"dice": [d1, d2, d3], "off_table": bool}
    """
    if seed is not None:
        rng = random.Random(seed)

    off_table = roll_is_off_table(rng, off_table_probability)
    dice = roll_triple(rng)
    return {"dice": dice, "off_table": off_table}
