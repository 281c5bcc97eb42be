"""
identities.py — Tie players' full names to the nicknames used during play

Right/wrong answers and score tables name players by nickname ("Mike"),
while the contestant list only has full names ("Michael Smith"). Matching
runs in passes of increasing tolerance:

  1. exact:  the full name starts with the nickname
  2. elimination: one nickname and one player left
  3. shrinking: drop the last t letters of the nickname, t = 1, 2, ...
     ("Mike" vs "Michael" matches at "Mi")

Team games (more than three contestants) skip matching: nicknames on the
board are team names, so each player goes by their first name.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from bs4 import BeautifulSoup

from jarchive.config import MAX_CALL_NAMES, MAX_MATCH_TOLERANCE, TEAM_GAME_MIN_PLAYERS
from jarchive.errors import UnresolvedIdentifierError
from jarchive.models import Participant, SegmentType
from jarchive.parsing import unescape_call_name

logger = logging.getLogger(__name__)


def collect_call_names(soup: BeautifulSoup) -> list[str]:
    """Nicknames from the first score table, deduplicated in first-seen order."""
    call_names: list[str] = []
    for node in soup.select("td.score_player_nickname"):
        if len(call_names) >= MAX_CALL_NAMES:
            break
        name = unescape_call_name(node.get_text())
        if name and name not in call_names:
            call_names.append(name)
    return call_names


def is_team_game(participants: Sequence[Participant]) -> bool:
    return len(participants) >= TEAM_GAME_MIN_PLAYERS


def parse_segment_played(description: str) -> SegmentType:
    """Read 'Playing the Double Jeopardy! Round ...' off a team player's intro."""
    text = description or ""
    if "Playing the Double Jeopardy! Round" in text:
        return SegmentType.DOUBLE
    if "Playing the Jeopardy! Round" in text:
        return SegmentType.STANDARD
    return SegmentType.FINAL


# ------------------------------------------------------------
# Matching passes
# ------------------------------------------------------------
def _match_prefix(full_name: str, pool: list[str], tolerance: int) -> Optional[str]:
    for call_name in pool:
        shortened = call_name[: max(len(call_name) - tolerance, 0)]
        if shortened and full_name.startswith(shortened):
            return call_name
    return None


def _assign_by_elimination(participants: Sequence[Participant], pool: list[str]) -> None:
    unassigned = [p for p in participants if p.call_name is None]
    if len(pool) == 1 and len(unassigned) == 1:
        unassigned[0].call_name = pool.pop()
        logger.debug(f"Nickname {unassigned[0].call_name!r} assigned to {unassigned[0]} by elimination")


def _assign_pass(participants: Sequence[Participant], pool: list[str], tolerance: int) -> None:
    for player in participants:
        if player.call_name is not None:
            continue
        _assign_by_elimination(participants, pool)
        if player.call_name is not None or not pool:
            continue
        matched = _match_prefix(player.name, pool, tolerance)
        if matched is not None:
            player.call_name = matched
            pool.remove(matched)


def resolve_call_names(
    call_names: Sequence[str],
    participants: Sequence[Participant],
    game_label: str = "",
) -> list[Participant]:
    """
    Assign call_name on each participant in place and return them.
    Raises UnresolvedIdentifierError once the tolerance bound is passed.
    """
    if is_team_game(participants):
        assign_team_call_names(participants)
        return list(participants)

    pool = [c for c in call_names]
    for player in participants:
        if player.call_name in pool:
            pool.remove(player.call_name)

    _assign_pass(participants, pool, tolerance=0)
    _assign_by_elimination(participants, pool)

    tolerance = 1
    while pool:
        if tolerance > MAX_MATCH_TOLERANCE:
            raise UnresolvedIdentifierError(game_label, pool)
        _assign_pass(participants, pool, tolerance)
        _assign_by_elimination(participants, pool)
        tolerance += 1

    return list(participants)


def assign_team_call_names(participants: Sequence[Participant]) -> None:
    for player in participants:
        tokens = player.name.split()
        player.call_name = tokens[0] if tokens else player.name
        if player.segment_played is None:
            player.segment_played = parse_segment_played(player.description)
