"""
Single place for default session configuration.
Change these to switch what a new session starts with when the host does not say otherwise.
"""
from chinchiro.engine import OFF_TABLE_PROBABILITY

DEFAULT_STARTING_BALANCE = 20000
DEFAULT_PLAYER_NAMES = ["Player 1", "Player 2"]
DEFAULT_OFF_TABLE_PROBABILITY = OFF_TABLE_PROBABILITY

# Amount added or repaid by a single top-up/repay button press when the client sends no amount.
DEFAULT_TOP_UP_AMOUNT = 10000
