from __future__ import annotations

import copy

import pytest

from jarchive.snapshot import ScoreSnapshot


def test_starting_snapshot_is_zero_for_everyone() -> None:
    snap = ScoreSnapshot.starting([3, 1, 2])

    assert snap.items() == [(1, 0), (2, 0), (3, 0)]
    assert len(snap) == 3


def test_with_delta_returns_new_snapshot_and_leaves_original_alone() -> None:
    before = ScoreSnapshot({1: 200, 2: 0})

    after = before.with_delta(1, -400)

    assert after.amount(1) == -200
    assert before.amount(1) == 200
    assert after is not before


def test_with_deltas_applies_all_changes_at_once() -> None:
    snap = ScoreSnapshot.starting([1, 2, 3]).with_deltas([(1, 400), (3, -400), (1, 200)])

    assert snap.to_dict() == {1: 600, 2: 0, 3: -400}


def test_transitions_reject_unknown_player() -> None:
    snap = ScoreSnapshot.starting([1])

    with pytest.raises(KeyError):
        snap.with_delta(9, 100)
    with pytest.raises(KeyError):
        snap.with_deltas([(9, 100)])
    with pytest.raises(KeyError):
        snap.with_amount(9, 100)


def test_with_amount_overwrites_one_player() -> None:
    snap = ScoreSnapshot({1: -400, 2: 1200}).with_amount(1, 400)

    assert snap == ScoreSnapshot({1: 400, 2: 1200})


def test_rekeyed_moves_amounts_to_new_ids() -> None:
    snap = ScoreSnapshot({10: 200, 20: 0}).rekeyed({10: 11, 20: 21})

    assert snap.to_dict() == {11: 200, 21: 0}
    assert 10 not in snap


def test_copies_are_independent_and_equal() -> None:
    snap = ScoreSnapshot({1: 100})

    assert copy.copy(snap) == snap
    assert copy.deepcopy(snap) == snap
    assert hash(snap.copy()) == hash(snap)
    assert copy.copy(snap).with_delta(1, 100).amount(1) == 200
    assert snap.amount(1) == 100


def test_iterates_in_player_id_order() -> None:
    snap = ScoreSnapshot({30: 1, 10: 2, 20: 3})

    assert list(snap) == [10, 20, 30]
    assert repr(snap) == "ScoreSnapshot({10: 2, 20: 3, 30: 1})"
