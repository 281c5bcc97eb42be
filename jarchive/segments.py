"""
segments.py — Build one round (Jeopardy!, Double Jeopardy!, Final Jeopardy!)

Per round:
  - read the categories left to right
  - read every clue cell left to right, top to bottom, tracking row/column
  - turn each clue's annotation into responses
  - replay the clues in the order they were picked
  - check the running totals against the scores printed at the end of the
    round and correct them where they disagree (rulings reversed after a
    commercial break never show up clue by clue)

A bad clue only costs that clue: it is dropped and noted in
Segment.defects. Anything else wrong with the round raises.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from bs4 import BeautifulSoup, Tag

from jarchive.config import ROW_BASE_VALUES, VALUE_CUTOVER_DATE
from jarchive.errors import MalformedDocumentError, ValueParseError
from jarchive.identities import is_team_game
from jarchive.models import Category, Event, Participant, ParticipantRef, Segment, SegmentType
from jarchive.parsing import norm_spaces, parse_int, parse_money
from jarchive.replay import order_events, replay_events
from jarchive.responses import build_final_responses, build_standard_responses, extract_annotation
from jarchive.snapshot import ScoreSnapshot

logger = logging.getLogger(__name__)

ROUND_ELEMENT_IDS = {
    SegmentType.STANDARD: "jeopardy_round",
    SegmentType.DOUBLE: "double_jeopardy_round",
    SegmentType.FINAL: "final_jeopardy_round",
}

CHECKPOINT_HEADINGS = {
    SegmentType.STANDARD: "Scores at the end of the Jeopardy! Round:",
    SegmentType.DOUBLE: "Scores at the end of the Double Jeopardy! Round:",
    SegmentType.FINAL: "Final scores:",
}


# ------------------------------------------------------------
# Board values
# ------------------------------------------------------------
def row_base_value(segment_type: SegmentType, air_date: Optional[date]) -> int:
    base = ROW_BASE_VALUES[segment_type.value]
    if air_date is not None and air_date >= VALUE_CUTOVER_DATE:
        return base * 2
    return base


def estimate_face_value(row: int, segment_type: SegmentType, air_date: Optional[date]) -> int:
    """Value of a clue nobody uncovered: an estimate, not a scraped fact."""
    return row * row_base_value(segment_type, air_date)


# ------------------------------------------------------------
# Players in this round
# ------------------------------------------------------------
def team_opening_snapshot(
    snapshot: ScoreSnapshot,
    participants: Sequence[Participant],
    segment_type: SegmentType,
) -> ScoreSnapshot:
    """Hand each team's score to the teammate who plays this round."""
    by_id = {p.player_id: p for p in participants}
    mapping = {}
    for pid in snapshot:
        team = by_id[pid].team_name if pid in by_id else None
        incoming = next(
            (p for p in participants if p.team_name == team and p.segment_played == segment_type),
            None,
        )
        if team is None or incoming is None:
            raise MalformedDocumentError(
                f"No player for team {team!r} in the {segment_type.value} round"
            )
        mapping[pid] = incoming.player_id
    return snapshot.rekeyed(mapping)


def build_roster(
    participants: Sequence[Participant],
    snapshot: ScoreSnapshot,
) -> dict[str, ParticipantRef]:
    """Names a response may be credited to -> player, for players in the snapshot."""
    roster: dict[str, ParticipantRef] = {}
    active = [p for p in participants if p.player_id in snapshot]
    for player in active:
        if player.call_name:
            roster.setdefault(player.call_name, player.ref())
    for player in active:
        if player.team_name:
            roster.setdefault(player.team_name, player.ref())
    return roster


# ------------------------------------------------------------
# Board extraction
# ------------------------------------------------------------
def extract_categories(round_element: Tag) -> list[Category]:
    return [
        Category(name=norm_spaces(node.get_text()), position=i)
        for i, node in enumerate(round_element.select("td.category_name"), start=1)
    ]


def parse_clue(
    cell: Tag,
    category: Category,
    row: int,
    segment_type: SegmentType,
    air_date: Optional[date],
    roster: dict[str, ParticipantRef],
    annotation_host: Optional[Tag] = None,
) -> Event:
    event = Event(
        category=category,
        row=row,
        value=estimate_face_value(row, segment_type, air_date),
    )

    if cell.find(True) is None:
        # uncovered before time ran out
        event.never_revealed = True
        return event

    is_final = segment_type == SegmentType.FINAL
    if is_final:
        event.order = 1
    else:
        value_node = cell.find(class_="clue_value") or cell.find(class_="clue_value_daily_double")
        if value_node is None:
            raise MalformedDocumentError(f"Clue in {category} has no value marker")
        raw_value = value_node.get_text(strip=True)
        if raw_value.startswith("DD:"):
            event.is_daily_double = True
            raw_value = raw_value[3:].strip()
        event.value = parse_money(raw_value)
        if event.value < 0:
            raise ValueParseError(f"Negative clue value: {raw_value!r}", raw_value)

        order_node = cell.find(class_="clue_order_number")
        if order_node is None:
            raise MalformedDocumentError(f"Clue in {category} has no order number")
        event.order = parse_int(order_node.get_text(strip=True), "clue order number")
        if event.order < 1:
            raise ValueParseError(f"Revealed clue in {category} has order {event.order}", str(event.order))

    text_node = cell.find(class_="clue_text")
    if text_node is None:
        raise MalformedDocumentError(f"Clue in {category} has no clue text")
    event.text = norm_spaces(text_node.get_text())
    anchor = text_node.find("a", href=True)
    if anchor is not None:
        event.media_url = anchor["href"]

    host = annotation_host if annotation_host is not None else cell
    div = host.find("div", onmouseover=True)
    if div is None:
        raise MalformedDocumentError(f"Clue in {category} has no response annotation")
    annotation = extract_annotation(div["onmouseover"], is_final)
    event.presenter_comment = annotation.presenter_comment
    event.correct_response = annotation.correct_response
    if is_final:
        event.responses = build_final_responses(annotation, roster)
    else:
        event.responses = build_standard_responses(annotation, event.value, roster)
    return event


# ------------------------------------------------------------
# End-of-round checkpoint
# ------------------------------------------------------------
def locate_checkpoint(soup: BeautifulSoup, segment_type: SegmentType) -> Tag:
    """The score table printed under 'Scores at the end of the ... Round:'."""
    heading = CHECKPOINT_HEADINGS[segment_type]
    text = soup.find(string=lambda s: s is not None and s.strip() == heading)
    table = text.parent.find_next_sibling("table") if text is not None else None
    if table is None:
        raise MalformedDocumentError(f"No score table for {heading!r}")
    return table


def parse_checkpoint(table: Tag) -> tuple[list[tuple[str, int]], list[str]]:
    """
    Returns ([(nickname or team name, amount)], defects).
    First row holds the names, second row the amounts.
    """
    rows = table.find_all("tr")
    if len(rows) < 2:
        raise MalformedDocumentError("Score table needs a name row and an amount row")
    names = [norm_spaces(td.get_text()) for td in rows[0].find_all("td")]
    amounts = [td.get_text(strip=True) for td in rows[1].find_all("td")]

    entries = []
    defects = []
    for name, raw in zip(names, amounts):
        try:
            entries.append((name.replace("\\", ""), parse_money(raw)))
        except ValueParseError as e:
            defects.append(f"Score for {name!r} skipped: {e}")
    if not entries:
        raise MalformedDocumentError("Score table has no readable scores")
    return entries, defects


def apply_checkpoint(
    snapshot: ScoreSnapshot,
    entries: Sequence[tuple[str, int]],
    participants: Sequence[Participant],
    segment_type: SegmentType,
) -> tuple[ScoreSnapshot, bool]:
    """Overwrite running totals that disagree with the printed scores."""
    corrected = False
    for label, amount in entries:
        player = next(
            (
                p
                for p in participants
                if p.player_id in snapshot
                and (
                    p.call_name == label
                    or (p.team_name == label and p.segment_played == segment_type)
                )
            ),
            None,
        )
        if player is None:
            raise MalformedDocumentError(f"Score table names unknown player {label!r}")
        if snapshot.amount(player.player_id) != amount:
            logger.info(
                f"{segment_type.value}: score for {label} corrected "
                f"{snapshot.amount(player.player_id)} -> {amount}"
            )
            snapshot = snapshot.with_amount(player.player_id, amount)
            corrected = True
    return snapshot, corrected


# ------------------------------------------------------------
# Round assembly
# ------------------------------------------------------------
def build_segment(
    segment_type: SegmentType,
    round_element: Optional[Tag],
    opening: ScoreSnapshot,
    air_date: Optional[date],
    participants: Sequence[Participant],
    checkpoint: Optional[Tag],
) -> Segment:
    if round_element is None:
        raise MalformedDocumentError(f"{segment_type.value} round is missing")
    if checkpoint is None:
        raise MalformedDocumentError(f"{segment_type.value} round has no score checkpoint")

    if is_team_game(participants):
        opening = team_opening_snapshot(opening, participants, segment_type)
    roster = build_roster(participants, opening)

    segment = Segment(segment_type=segment_type)
    segment.categories = extract_categories(round_element)
    if not segment.categories:
        raise MalformedDocumentError(f"{segment_type.value} round has no categories")

    cells = round_element.select("td.clue")
    host = None
    if segment_type == SegmentType.FINAL:
        # a tiebreaker clue can follow; only the first one is scored
        cells = cells[:1]
        host = round_element.select_one("td.category")

    width = len(segment.categories)
    events = []
    for index, cell in enumerate(cells):
        row, col = index // width + 1, index % width
        try:
            events.append(
                parse_clue(cell, segment.categories[col], row, segment_type, air_date, roster, host)
            )
        except (MalformedDocumentError, ValueParseError) as e:
            msg = f"{segment_type.value} clue at row {row}, column {col + 1} skipped: {e}"
            logger.warning(msg)
            segment.defects.append(msg)

    closing = replay_events(events, opening)
    segment.events = order_events(events)

    entries, defects = parse_checkpoint(checkpoint)
    segment.defects.extend(defects)
    segment.snapshot, segment.has_score_correction = apply_checkpoint(
        closing, entries, participants, segment_type
    )
    return segment

