from __future__ import annotations

import json
from pathlib import Path

from jarchive.models import GameRecord
from jarchive.qc import run_record_qc, write_qc_outputs
from jarchive.records import build_game_record
from tests.pages import GAME_URL, soup, standard_game_html


def _checks(issues: list[dict]) -> list[tuple[str, str]]:
    return sorted((i["check_id"], i["severity"]) for i in issues)


def test_clean_game_reports_corrections_and_hidden_clues_only() -> None:
    record = build_game_record(soup(standard_game_html()), GAME_URL)

    summary, issues = run_record_qc([record])

    assert _checks(issues) == [("g_never_revealed", "INFO"), ("g_score_corrected", "INFO")]
    assert summary["total_records"] == 1
    assert summary["total_errors"] == 0
    assert summary["corrected_rounds"] == 1
    assert summary["incomplete_games"] == 0


def test_partial_game_is_an_error_with_missing_round_warning() -> None:
    record = build_game_record(soup(standard_game_html(final=False)), GAME_URL)

    summary, issues = run_record_qc([record])

    assert ("g_incomplete_load", "ERROR") in _checks(issues)
    missing = [i for i in issues if i["check_id"] == "g_round_missing"]
    assert [i["message"] for i in missing] == ["Final Jeopardy round missing"]
    assert summary["incomplete_games"] == 1
    assert summary["counts_by_check"]["g_round_missing"]["WARN"] == 1


def test_game_without_players_skips_round_checks() -> None:
    record = GameRecord(game_id=1, source_url="u", incomplete_load=True)

    _, issues = run_record_qc([record])

    assert _checks(issues) == [("g_incomplete_load", "ERROR"), ("g_players_missing", "ERROR")]


def test_write_qc_outputs(tmp_path: Path) -> None:
    summary, issues = run_record_qc([GameRecord(game_id=1, source_url="u", incomplete_load=True)])

    summary_path, issues_path = write_qc_outputs(summary, issues, tmp_path)

    assert summary_path.name == "scrape_qc_summary.json"
    assert json.loads(summary_path.read_text(encoding="utf-8"))["total_errors"] == 2
    assert len(issues_path.read_text(encoding="utf-8").splitlines()) == 2
