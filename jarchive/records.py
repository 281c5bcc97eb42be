"""
records.py — Assemble a full game from one parsed J!Archive game page

  1. header: game id (from the URL), show number and air date
  2. contestants: id, full name, intro text, team (team games only)
  3. nicknames: tie the score-table nicknames to the contestants
  4. rounds: Jeopardy!, Double Jeopardy!, Final Jeopardy!, each seeded with
     the corrected closing scores of the round before it

Each round is built in its own try block: one broken round marks the game
incomplete but does not throw the game out. build_game_record never raises
on a bad page; callers check GameRecord.incomplete_load.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from jarchive.errors import JArchiveError, MalformedDocumentError, ValueParseError
from jarchive.identities import collect_call_names, is_team_game, parse_segment_played, resolve_call_names
from jarchive.models import SEGMENT_ORDER, GameRecord, Participant, SegmentType
from jarchive.parsing import norm_spaces, parse_date, query_param_int, text_or_none
from jarchive.segments import ROUND_ELEMENT_IDS, build_segment, locate_checkpoint
from jarchive.snapshot import ScoreSnapshot

logger = logging.getLogger(__name__)

_SHOW_NUMBER_RE = re.compile(r"#\s*(\S+)")


# ------------------------------------------------------------
# Header and contestants
# ------------------------------------------------------------
def parse_game_header(soup: BeautifulSoup) -> tuple[str, date]:
    """'Show #4680 - Monday, January 3, 2005' -> ('4680', date(2005, 1, 3))"""
    text = text_or_none(soup.find(id="game_title"))
    if text is None:
        raise MalformedDocumentError("Game page has no game_title")
    if "-" not in text:
        raise ValueParseError(f"Could not split game title: {text!r}", text)
    show_part, date_part = text.split("-", 1)
    m = _SHOW_NUMBER_RE.search(show_part)
    show_number = m.group(1) if m else show_part.strip()
    return show_number, parse_date(date_part)


def _team_name(contestant: Tag) -> Optional[str]:
    """Team games put an <h3>Team Name (...)</h3> ahead of each team's players."""
    h3 = contestant.find_previous_sibling("h3")
    if h3 is None:
        return None
    name = norm_spaces(h3.get_text()).split("(")[0].strip()
    return name or None


def parse_contestant(contestant: Tag) -> Participant:
    anchor = contestant.find("a", href=True)
    if anchor is None:
        raise MalformedDocumentError("Contestant entry has no player link")
    player_id = query_param_int(anchor["href"], "player_id")
    if player_id is None:
        raise ValueParseError(f"Could not read player_id from {anchor['href']!r}", anchor["href"])

    after = "".join(
        s.get_text() if isinstance(s, Tag) else str(s) for s in anchor.next_siblings
    )
    player = Participant(
        player_id=player_id,
        name=norm_spaces(anchor.get_text()),
        description=norm_spaces(after).lstrip(",").strip(),
        team_name=_team_name(contestant),
    )
    if player.team_name is not None:
        player.segment_played = parse_segment_played(contestant.get_text(" "))
    return player


def extract_participants(soup: BeautifulSoup) -> list[Participant]:
    participants = [parse_contestant(c) for c in soup.select("p.contestants")]
    if not participants:
        raise MalformedDocumentError("Game page lists no contestants")
    return participants


def starting_snapshot(participants: list[Participant]) -> ScoreSnapshot:
    """Everyone at $0; in team games one player per team, the Jeopardy! round player."""
    if is_team_game(participants):
        return ScoreSnapshot.starting(
            p.player_id for p in participants if p.segment_played == SegmentType.STANDARD
        )
    return ScoreSnapshot.starting(p.player_id for p in participants)


# ------------------------------------------------------------
# Game assembly
# ------------------------------------------------------------
def build_game_record(soup: BeautifulSoup, source_url: str, description: str = "") -> GameRecord:
    record = GameRecord(
        game_id=query_param_int(source_url, "game_id"),
        source_url=source_url,
        description=description,
    )

    try:
        record.show_number, record.air_date = parse_game_header(soup)
        record.participants = extract_participants(soup)
        resolve_call_names(collect_call_names(soup), record.participants, record.label)
    except JArchiveError as e:
        logger.error(f"*** Failed to read players for {source_url}: {e}")
        record.incomplete_load = True
        return record

    running = starting_snapshot(record.participants)
    for segment_type in SEGMENT_ORDER:
        try:
            segment = build_segment(
                segment_type,
                soup.find(id=ROUND_ELEMENT_IDS[segment_type]),
                running,
                record.air_date,
                record.participants,
                locate_checkpoint(soup, segment_type),
            )
        except JArchiveError:
            logger.exception(f"*** Error processing {segment_type.value} round of {record}")
            record.incomplete_load = True
            continue

        if segment.defects:
            record.incomplete_load = True
        record.segments.append(segment)
        running = segment.snapshot

    record.snapshot = running.copy()
    return record
