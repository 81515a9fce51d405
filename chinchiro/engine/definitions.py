"""
Session definitions.
What a host supplies when a session starts: starting balance, seats and rule knobs.
Defaults live in chinchiro.config.
"""

from dataclasses import dataclass, field
from typing import Any

from chinchiro.engine import MIN_PLAYERS, MAX_PLAYERS
from chinchiro.engine.ledger import parse_amount


def _default_player_names() -> list[str]:
    from chinchiro.config import DEFAULT_PLAYER_NAMES
    return list(DEFAULT_PLAYER_NAMES)


def _default_starting_balance() -> int:
    from chinchiro.config import DEFAULT_STARTING_BALANCE
    return DEFAULT_STARTING_BALANCE


def _default_off_table_probability() -> float:
    from chinchiro.config import DEFAULT_OFF_TABLE_PROBABILITY
    return DEFAULT_OFF_TABLE_PROBABILITY


@dataclass
class SessionConfig:
    """Configuration accepted at session start."""
    starting_balance: int = field(default_factory=_default_starting_balance)
    player_names: list[str] = field(default_factory=_default_player_names)
    off_table_probability: float = field(default_factory=_default_off_table_probability)

    @property
    def player_count(self) -> int:
        return len(self.player_names)

    def validate(self) -> None:
        """Raise ValueError if the session cannot be started with this configuration."""
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.player_count}")
        if self.starting_balance <= 0:
            raise ValueError(f"Starting balance must be positive, got {self.starting_balance}")
        if not 0.0 <= self.off_table_probability <= 1.0:
            raise ValueError(
                f"Off-table probability must be within [0, 1], got {self.off_table_probability}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "starting_balance": self.starting_balance,
            "player_count": self.player_count,
            "player_names": list(self.player_names),
            "off_table_probability": self.off_table_probability,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionConfig":
        """
        Build a config from host input.
        Accepts camelCase (startingBalance, playerCount, playerNames) or snake_case keys.
        Blank names become "Player N"; playerCount pads or truncates the name list.
        A playerCount outside the seat bounds raises ValueError.
        """
        if not isinstance(data, dict):
            data = {}

        def _get(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        names_raw = _get("player_names", "playerNames")
        names = [str(n) for n in names_raw] if isinstance(names_raw, list) else _default_player_names()

        count_raw = _get("player_count", "playerCount")
        if count_raw is not None:
            count = parse_amount(count_raw)
            # Bound the count before padding
            if not MIN_PLAYERS <= count <= MAX_PLAYERS:
                raise ValueError(
                    f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {count}")
            names = names[:count]
            while len(names) < count:
                names.append("")

        names = [n.strip() or f"Player {i + 1}" for i, n in enumerate(names)]

        balance_raw = _get("starting_balance", "startingBalance")
        balance = parse_amount(balance_raw) if balance_raw is not None else _default_starting_balance()

        probability_raw = _get("off_table_probability", "offTableProbability")
        try:
            probability = (
                float(probability_raw) if probability_raw is not None
                else _default_off_table_probability()
            )
        except (TypeError, ValueError):
            probability = _default_off_table_probability()

        return cls(
            starting_balance=balance,
            player_names=names,
            off_table_probability=probability,
        )
