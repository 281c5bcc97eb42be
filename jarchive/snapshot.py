"""
snapshot.py — Score snapshots (player_id -> dollars at one point in the game)

A snapshot is treated as a value. Every change returns a fresh snapshot, so
a snapshot stored on a clue or a round can never be altered later by the
replay of another clue.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional


class ScoreSnapshot:
    """Cumulative dollar amounts keyed by player id, iterated in id order."""

    __slots__ = ("_amounts",)

    def __init__(self, amounts: Optional[Mapping[int, int]] = None) -> None:
        self._amounts: dict[int, int] = dict(amounts or {})

    @classmethod
    def starting(cls, player_ids: Iterable[int]) -> "ScoreSnapshot":
        return cls({pid: 0 for pid in player_ids})

    # ------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------
    def amount(self, player_id: int) -> int:
        return self._amounts[player_id]

    def player_ids(self) -> list[int]:
        return sorted(self._amounts)

    def items(self) -> list[tuple[int, int]]:
        return [(pid, self._amounts[pid]) for pid in self.player_ids()]

    def to_dict(self) -> dict[int, int]:
        return dict(self.items())

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._amounts

    def __iter__(self) -> Iterator[int]:
        return iter(self.player_ids())

    def __len__(self) -> int:
        return len(self._amounts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScoreSnapshot):
            return NotImplemented
        return self._amounts == other._amounts

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{pid}: {amt}" for pid, amt in self.items())
        return f"ScoreSnapshot({{{inner}}})"

    # ------------------------------------------------------------
    # Transitions (each returns a new snapshot)
    # ------------------------------------------------------------
    def copy(self) -> "ScoreSnapshot":
        return ScoreSnapshot(self._amounts)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "ScoreSnapshot":
        return self.copy()

    def with_delta(self, player_id: int, delta: int) -> "ScoreSnapshot":
        if player_id not in self._amounts:
            raise KeyError(f"player {player_id} is not in this snapshot")
        new = self.copy()
        new._amounts[player_id] += delta
        return new

    def with_deltas(self, deltas: Iterable[tuple[int, int]]) -> "ScoreSnapshot":
        new = self.copy()
        for player_id, delta in deltas:
            if player_id not in new._amounts:
                raise KeyError(f"player {player_id} is not in this snapshot")
            new._amounts[player_id] += delta
        return new

    def with_amount(self, player_id: int, amount: int) -> "ScoreSnapshot":
        if player_id not in self._amounts:
            raise KeyError(f"player {player_id} is not in this snapshot")
        new = self.copy()
        new._amounts[player_id] = amount
        return new

    def rekeyed(self, mapping: Mapping[int, int]) -> "ScoreSnapshot":
        """Move amounts to new player ids (team games swap players between rounds)."""
        return ScoreSnapshot({mapping.get(pid, pid): amt for pid, amt in self._amounts.items()})
