"""
Chinchiro Round-Settlement Engine
Core rules engine without web framework or UI
"""

DICE_SIDES = 6
DICE_PER_ROLL = 3
MAX_ROLLS = 3

MIN_PLAYERS = 2
MAX_PLAYERS = 6

# Chance that a roll is forced to the Off-Table hand regardless of the dice shown.
OFF_TABLE_PROBABILITY = 0.01
