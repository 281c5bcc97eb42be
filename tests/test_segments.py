from __future__ import annotations

from datetime import date

import pytest

from jarchive.errors import MalformedDocumentError
from jarchive.models import Participant, SegmentType
from jarchive.segments import (
    apply_checkpoint,
    build_segment,
    estimate_face_value,
    locate_checkpoint,
    parse_checkpoint,
)
from jarchive.snapshot import ScoreSnapshot
from tests.pages import (
    J_HEADING,
    clue_cell,
    double_round,
    empty_cell,
    jeopardy_round,
    round_div,
    score_table,
    soup,
    standard_payload,
)

AIR_DATE = date(2002, 5, 14)


def _players() -> list[Participant]:
    return [
        Participant(player_id=1, name="Ken Jennings", call_name="Ken"),
        Participant(player_id=2, name="Brad Rutter", call_name="Brad"),
        Participant(player_id=3, name="Michael Smith", call_name="Mike"),
    ]


def _build(html: str, segment_type: SegmentType, opening: ScoreSnapshot | None = None):
    doc = soup(html)
    element_id = "jeopardy_round" if segment_type == SegmentType.STANDARD else "double_jeopardy_round"
    return build_segment(
        segment_type,
        doc.find(id=element_id),
        opening or ScoreSnapshot.starting([1, 2, 3]),
        AIR_DATE,
        _players(),
        locate_checkpoint(doc, segment_type),
    )


@pytest.mark.parametrize(
    "row, segment_type, air_date, expected",
    [
        (3, SegmentType.STANDARD, date(2001, 11, 23), 300),
        (3, SegmentType.STANDARD, date(2001, 11, 26), 600),
        (2, SegmentType.DOUBLE, date(1995, 1, 1), 400),
        (2, SegmentType.DOUBLE, date(2010, 1, 1), 800),
        (1, SegmentType.FINAL, date(2010, 1, 1), 0),
    ],
)
def test_estimate_face_value(row: int, segment_type: SegmentType, air_date: date, expected: int) -> None:
    assert estimate_face_value(row, segment_type, air_date) == expected


def test_build_segment_reads_board_and_replays_in_pick_order() -> None:
    segment = _build(jeopardy_round(), SegmentType.STANDARD)

    assert [c.name for c in segment.categories] == ["POTENT POTABLES", "WORLD CAPITALS"]
    assert [e.order for e in segment.events] == [1, 2, 3, 0]
    france, daily_double, gimlet, hidden = segment.events

    assert france.category.position == 2 and france.row == 1
    assert france.presenter_comment == "No."
    assert [(r.participant.call_name, r.is_correct) for r in france.responses] == [("Mike", False), ("Brad", True)]
    assert france.responses[0].text == "What is Rome?"
    assert france.snapshot_after.to_dict() == {1: 0, 2: 400, 3: -400}

    assert daily_double.is_daily_double
    assert daily_double.value == 1000
    assert daily_double.media_url == "http://www.j-archive.com/media/peru.jpg"
    assert daily_double.text == "Capital of this country"
    assert daily_double.snapshot_after.to_dict() == {1: -1000, 2: 400, 3: -400}

    assert gimlet.correct_response == "a gimlet"
    assert gimlet.snapshot_after.to_dict() == {1: -600, 2: 400, 3: -400}

    assert hidden.never_revealed
    assert hidden.row == 2 and hidden.category.position == 1
    assert hidden.value == 400
    assert hidden.snapshot_after is None
    assert hidden.responses == []

    assert segment.snapshot.to_dict() == {1: -600, 2: 400, 3: -400}
    assert segment.has_score_correction is False
    assert segment.defects == []


def test_checkpoint_overrides_disagreeing_scores() -> None:
    opening = ScoreSnapshot({1: -600, 2: 400, 3: -400})

    segment = _build(double_round(), SegmentType.DOUBLE, opening)

    # running total says -400 for Mike, the page says 400
    assert segment.events[-1].snapshot_after.amount(3) == -400
    assert segment.snapshot.to_dict() == {1: -600, 2: 1200, 3: 400}
    assert segment.has_score_correction is True


def test_apply_checkpoint_only_flags_real_changes() -> None:
    snap = ScoreSnapshot({1: 1000, 2: 800, 3: 0})

    same, corrected = apply_checkpoint(snap, [("Ken", 1000), ("Brad", 800)], _players(), SegmentType.STANDARD)
    assert same == snap and corrected is False

    fixed, corrected = apply_checkpoint(snap, [("Ken", 1200)], _players(), SegmentType.STANDARD)
    assert fixed.to_dict() == {1: 1200, 2: 800, 3: 0}
    assert corrected is True
    assert snap.amount(1) == 1000


def test_apply_checkpoint_rejects_unknown_name() -> None:
    with pytest.raises(MalformedDocumentError):
        apply_checkpoint(ScoreSnapshot.starting([1, 2, 3]), [("Zed", 0)], _players(), SegmentType.STANDARD)


def test_parse_checkpoint_collects_unreadable_scores_as_defects() -> None:
    table = soup(score_table(J_HEADING, [("Ken", 200), ("Brad", 0)])).find("table")
    table.find_all("tr")[1].find_all("td")[1].string = "n/a"

    entries, defects = parse_checkpoint(table)

    assert entries == [("Ken", 200)]
    assert len(defects) == 1 and "Brad" in defects[0]


def test_bad_clue_is_dropped_and_recorded() -> None:
    broken = '<td class="clue"><table><tr><td class="clue_value">$200</td></tr></table></td>'
    html = round_div(
        "jeopardy_round",
        ["A", "B"],
        [
            clue_cell("clue_J_1_1", "Fine clue", 400, 1, standard_payload("yes", right="Ken")),
            broken,
            empty_cell(),
            empty_cell(),
        ],
        score_table(J_HEADING, [("Ken", 400), ("Brad", 0), ("Mike", 0)]),
    )

    segment = _build(html, SegmentType.STANDARD)

    assert len(segment.events) == 3
    assert len(segment.defects) == 1
    assert "row 1, column 2" in segment.defects[0]
    assert segment.snapshot.to_dict() == {1: 400, 2: 0, 3: 0}


def test_revealed_clue_with_order_zero_is_dropped_and_recorded() -> None:
    html = round_div(
        "jeopardy_round",
        ["A", "B"],
        [
            clue_cell("clue_J_1_1", "Zero order", 200, 0, standard_payload("no", right="Ken")),
            clue_cell("clue_J_2_1", "First pick", 200, 1, standard_payload("yes", right="Brad")),
        ],
        score_table(J_HEADING, [("Ken", 0), ("Brad", 200), ("Mike", 0)]),
    )

    segment = _build(html, SegmentType.STANDARD)

    assert [(e.order, e.never_revealed) for e in segment.events] == [(1, False)]
    assert len(segment.defects) == 1
    assert "row 1, column 1" in segment.defects[0]
    assert all(e.order > 0 for e in segment.events if not e.never_revealed)
    assert segment.snapshot.to_dict() == {1: 0, 2: 200, 3: 0}
    assert segment.has_score_correction is False


def test_missing_round_or_checkpoint_raises() -> None:
    with pytest.raises(MalformedDocumentError):
        build_segment(SegmentType.STANDARD, None, ScoreSnapshot.starting([1]), AIR_DATE, _players(), None)

    doc = soup(round_div("jeopardy_round", ["A"], [empty_cell()]))
    with pytest.raises(MalformedDocumentError):
        locate_checkpoint(doc, SegmentType.STANDARD)
