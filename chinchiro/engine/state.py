"""
Game state representation.
All state is immutable from the caller's view; transitions return new state copies.
Includes JSON serialization for handing state to a UI.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from chinchiro.engine import OFF_TABLE_PROBABILITY
from chinchiro.engine.hands import Hand

PHASE_BETTING = "betting"
PHASE_ACTING = "acting"
PHASE_RESULT = "result"

PHASES = (PHASE_BETTING, PHASE_ACTING, PHASE_RESULT)


def _int(v: Any, default: int) -> int:
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def _ensure_dice(value: Any) -> list[int]:
    """Last shown dice; [1, 1, 1] when missing or malformed."""
    if isinstance(value, list) and len(value) == 3:
        return [_int(x, 1) for x in value]
    return [1, 1, 1]


@dataclass
class Player:
    """A seated player. Created once per session; per-round fields are reset each betting phase."""
    player_id: str  # e.g. "p-0"
    name: str
    balance: int
    debt: int = 0  # Borrowed (topped-up) funds not yet repaid
    bet: int = 0  # Committed bet for this round, 0..balance
    is_banker: bool = False
    dice: list[int] = field(default_factory=lambda: [1, 1, 1])  # Last authoritative throw
    hand: Hand | None = None
    roll_count: int = 0  # 0..MAX_ROLLS
    turn_finished: bool = False
    net_result: int = 0  # Signed result of the last settled round

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "balance": self.balance,
            "debt": self.debt,
            "bet": self.bet,
            "is_banker": self.is_banker,
            "dice": list(self.dice),
            "hand": self.hand.to_dict() if self.hand else None,
            "roll_count": self.roll_count,
            "turn_finished": self.turn_finished,
            "net_result": self.net_result,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        if not isinstance(data, dict):
            data = {}
        hand_raw = data.get("hand")
        return cls(
            player_id=str(data.get("player_id") or ""),
            name=str(data.get("name") or ""),
            balance=_int(data.get("balance"), 0),
            debt=max(0, _int(data.get("debt"), 0)),
            bet=max(0, _int(data.get("bet"), 0)),
            is_banker=bool(data.get("is_banker", False)),
            dice=_ensure_dice(data.get("dice")),
            hand=Hand.from_dict(hand_raw) if isinstance(hand_raw, dict) else None,
            roll_count=max(0, _int(data.get("roll_count"), 0)),
            turn_finished=bool(data.get("turn_finished", False)),
            net_result=_int(data.get("net_result"), 0),
        )


@dataclass
class GameState:
    """Complete session state."""
    phase: str  # "betting", "acting", "result"
    players: list[Player]  # Seat order = registration order
    banker_index: int = 0  # Seat index of this round's banker
    # Player ids in acting order (challengers by ascending bet, banker last). Empty while betting.
    turn_order: list[str] = field(default_factory=list)
    current_turn_index: int = 0
    round_number: int = 1
    off_table_probability: float = OFF_TABLE_PROBABILITY

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    def get_player(self, player_id: str) -> Player:
        """Look up a player by id; unknown ids are a caller error."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise ValueError(f"Unknown player: {player_id}")

    @property
    def banker(self) -> Player:
        return self.players[self.banker_index]

    @property
    def challengers(self) -> list[Player]:
        return [p for i, p in enumerate(self.players) if i != self.banker_index]

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "phase": self.phase,
            "players": [p.to_dict() for p in self.players],
            "banker_index": self.banker_index,
            "turn_order": list(self.turn_order),
            "current_turn_index": self.current_turn_index,
            "round_number": self.round_number,
            "off_table_probability": self.off_table_probability,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Create GameState from a dictionary (missing/None fields fall back to defaults)."""
        players_raw = data.get("players") or []
        if not isinstance(players_raw, list):
            players_raw = []
        turn_order = data.get("turn_order") or []
        if not isinstance(turn_order, list):
            turn_order = []
        phase = str(data.get("phase") or PHASE_BETTING)
        if phase not in PHASES:
            phase = PHASE_BETTING
        try:
            probability = float(data.get("off_table_probability", OFF_TABLE_PROBABILITY))
        except (TypeError, ValueError):
            probability = OFF_TABLE_PROBABILITY
        return cls(
            phase=phase,
            players=[Player.from_dict(p) for p in players_raw if isinstance(p, dict)],
            banker_index=_int(data.get("banker_index"), 0),
            turn_order=[str(x) for x in turn_order],
            current_turn_index=_int(data.get("current_turn_index"), 0),
            round_number=_int(data.get("round_number"), 1),
            off_table_probability=probability,
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize GameState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "GameState":
        """Deserialize GameState from a JSON string."""
        return cls.from_dict(json.loads(json_str))
