from __future__ import annotations

import pytest

from jarchive.errors import UnresolvedIdentifierError
from jarchive.identities import collect_call_names, is_team_game, parse_segment_played, resolve_call_names
from jarchive.models import Participant, SegmentType
from tests.pages import score_table, soup


def _players(*names: str) -> list[Participant]:
    return [Participant(player_id=i, name=n) for i, n in enumerate(names, start=1)]


def test_exact_prefix_match() -> None:
    players = _players("Ken Jennings", "Brad Rutter", "Julia Collins")

    resolve_call_names(["Julia", "Ken", "Brad"], players)

    assert [p.call_name for p in players] == ["Ken", "Brad", "Julia"]


def test_shrinking_match_picks_the_right_nickname() -> None:
    players = _players("Michael Smith", "Mitchell Jones", "Miriam Lee")

    resolve_call_names(["Mike", "Mitch", "Miriam"], players)

    assert {p.name: p.call_name for p in players} == {
        "Michael Smith": "Mike",
        "Mitchell Jones": "Mitch",
        "Miriam Lee": "Miriam",
    }


def test_fewer_nicknames_than_players_leaves_one_unassigned() -> None:
    players = _players("Michael Smith", "Mitchell Lee", "Miriam Cho")

    resolve_call_names(["Mike", "Mitch"], players)

    assert [p.call_name for p in players] == ["Mike", "Mitch", None]


def test_last_nickname_goes_to_last_player() -> None:
    players = _players("Ken Jennings", "Brad Rutter", "Robert Smith")

    resolve_call_names(["Ken", "Brad", "Bob"], players)

    assert players[2].call_name == "Bob"


def test_nicknames_already_assigned_are_kept() -> None:
    players = _players("Ken Jennings", "Brad Rutter")
    players[1].call_name = "B-Rad"

    resolve_call_names(["Ken", "B-Rad"], players)

    assert [p.call_name for p in players] == ["Ken", "B-Rad"]


def test_unmatched_nickname_raises_after_tolerance_is_exhausted() -> None:
    players = _players("Ann Lee", "Bob Ray")

    with pytest.raises(UnresolvedIdentifierError) as exc:
        resolve_call_names(["Zed"], players, "GameId: 1 Show #: 2")

    assert exc.value.remaining == ["Zed"]
    assert exc.value.game_label == "GameId: 1 Show #: 2"


def test_team_game_uses_first_names() -> None:
    players = [
        Participant(player_id=10, name="Anna Smith", description="Playing the Jeopardy! Round", team_name="Alpha"),
        Participant(player_id=11, name="Andy Jones", description="Playing the Double Jeopardy! Round", team_name="Alpha"),
        Participant(player_id=20, name="Bob Brown", description="Playing the Jeopardy! Round", team_name="Beta"),
        Participant(player_id=21, name="Beth Gray", description="Playing the Final Jeopardy! Round", team_name="Beta"),
    ]

    assert is_team_game(players)
    resolve_call_names(["Alpha", "Beta"], players)

    assert [p.call_name for p in players] == ["Anna", "Andy", "Bob", "Beth"]
    assert [p.segment_played for p in players] == [
        SegmentType.STANDARD,
        SegmentType.DOUBLE,
        SegmentType.STANDARD,
        SegmentType.FINAL,
    ]


def test_parse_segment_played() -> None:
    assert parse_segment_played("Playing the Double Jeopardy! Round, a chef") == SegmentType.DOUBLE
    assert parse_segment_played("Playing the Jeopardy! Round, a chef") == SegmentType.STANDARD
    assert parse_segment_played("a chef") == SegmentType.FINAL


def test_collect_call_names_reads_first_score_table() -> None:
    html = (
        score_table("Scores at the first commercial break:", [("Ken", 0), ("Brad", 0), ("O\\'Neil", 0)])
        + score_table("Scores at the end of the Jeopardy! Round:", [("Ken", 0), ("Brad", 0), ("Zed", 0)])
    )

    assert collect_call_names(soup(html)) == ["Ken", "Brad", "O'Neil"]
