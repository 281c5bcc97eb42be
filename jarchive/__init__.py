"""J!Archive game pages -> normalized game records with running scores."""

from jarchive.errors import JArchiveError, MalformedDocumentError, UnresolvedIdentifierError, ValueParseError
from jarchive.models import (
    Category,
    Event,
    GameRecord,
    Participant,
    ParticipantRef,
    Response,
    Season,
    Segment,
    SegmentType,
)
from jarchive.records import build_game_record
from jarchive.snapshot import ScoreSnapshot

__all__ = [
    "Category",
    "Event",
    "GameRecord",
    "JArchiveError",
    "MalformedDocumentError",
    "Participant",
    "ParticipantRef",
    "Response",
    "ScoreSnapshot",
    "Season",
    "Segment",
    "SegmentType",
    "UnresolvedIdentifierError",
    "ValueParseError",
    "build_game_record",
]
