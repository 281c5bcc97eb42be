"""
models.py — The game record value tree

GameRecord
  ├── participants: Participant
  └── segments: Segment (one per round)
        ├── categories: Category
        └── events: Event (one per clue, in the order they were revealed)
              ├── snapshot_after: ScoreSnapshot
              └── responses: Response
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from jarchive.snapshot import ScoreSnapshot


class SegmentType(str, Enum):
    STANDARD = "Jeopardy"
    DOUBLE = "Double Jeopardy"
    FINAL = "Final Jeopardy"


SEGMENT_ORDER = (SegmentType.STANDARD, SegmentType.DOUBLE, SegmentType.FINAL)


@dataclass(frozen=True)
class ParticipantRef:
    """Read-only view of a player, as attached to responses."""
    player_id: int
    call_name: Optional[str]
    team_name: Optional[str] = None
    segment_played: Optional[SegmentType] = None


@dataclass
class Participant:
    player_id: int
    name: str
    call_name: Optional[str] = None
    description: str = ""
    team_name: Optional[str] = None
    # Team games only: a team sends a different player to each round.
    segment_played: Optional[SegmentType] = None

    def ref(self) -> ParticipantRef:
        return ParticipantRef(
            player_id=self.player_id,
            call_name=self.call_name,
            team_name=self.team_name,
            segment_played=self.segment_played,
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.player_id})"


@dataclass(frozen=True)
class Category:
    name: str
    position: int  # 1-based, left to right on the board

    def __str__(self) -> str:
        return f"{self.name} ({self.position})"


@dataclass
class Response:
    participant: ParticipantRef
    text: Optional[str]
    wager: int
    is_correct: bool
    order: int  # 1-based within the clue

    @property
    def delta(self) -> int:
        return self.wager if self.is_correct else -self.wager


@dataclass
class Event:
    category: Category
    row: int
    order: int = 0  # 0 = never revealed
    value: int = 0
    text: Optional[str] = None
    media_url: Optional[str] = None
    is_daily_double: bool = False
    never_revealed: bool = False
    presenter_comment: Optional[str] = None
    correct_response: Optional[str] = None
    snapshot_after: Optional[ScoreSnapshot] = None
    responses: list[Response] = field(default_factory=list)


@dataclass
class Segment:
    segment_type: SegmentType
    categories: list[Category] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    snapshot: Optional[ScoreSnapshot] = None
    has_score_correction: bool = False
    defects: list[str] = field(default_factory=list)


@dataclass
class GameRecord:
    game_id: Optional[int]
    source_url: str
    show_number: Optional[str] = None
    air_date: Optional[date] = None
    description: str = ""
    participants: list[Participant] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    snapshot: Optional[ScoreSnapshot] = None
    incomplete_load: bool = False

    @property
    def label(self) -> str:
        return f"GameId: {self.game_id} Show #: {self.show_number}"

    def segment(self, segment_type: SegmentType) -> Optional[Segment]:
        return next((s for s in self.segments if s.segment_type == segment_type), None)

    def __str__(self) -> str:
        aired = self.air_date.isoformat() if self.air_date else "?"
        return f"#{self.show_number} ({self.game_id}) - AD: {aired}"


@dataclass
class Season:
    name: str
    url: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    games: list[GameRecord] = field(default_factory=list)

    def __str__(self) -> str:
        start = self.start_date.isoformat() if self.start_date else "?"
        end = self.end_date.isoformat() if self.end_date else "?"
        return f"{self.name} ({start}-{end})"
