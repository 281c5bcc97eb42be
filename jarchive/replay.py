"""
replay.py — Re-run a round's clues in the order they were picked

The board is read left to right, top to bottom, which is not the order
the clues were played. To get the running score after every clue we sort
by the order number scraped from the board and replay the responses.
Clues nobody uncovered go last, by category then value, so the output is
stable even though their "order" is meaningless.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from jarchive.models import Event
from jarchive.snapshot import ScoreSnapshot


def reveal_sort_key(event: Event) -> tuple[int, int, int, int]:
    if event.never_revealed or event.order == 0:
        return (1, 0, event.category.position, event.value)
    return (0, event.order, 0, 0)


def order_events(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=reveal_sort_key)


def apply_event(snapshot: ScoreSnapshot, event: Event) -> ScoreSnapshot:
    """Score after this clue: +wager for a right answer, -wager for a wrong one."""
    return snapshot.with_deltas((r.participant.player_id, r.delta) for r in event.responses)


def replay_events(events: Sequence[Event], opening: ScoreSnapshot) -> ScoreSnapshot:
    """
    Walk the clues in reveal order, storing a fresh snapshot on each revealed
    clue. Returns the closing snapshot; never-revealed clues keep None.
    """
    running = opening.copy()
    for event in order_events(events):
        if event.never_revealed:
            event.snapshot_after = None
            continue
        running = apply_event(running, event)
        event.snapshot_after = running
    return running
