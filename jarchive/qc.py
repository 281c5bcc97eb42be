"""
qc.py — Scrape QC: what came out incomplete, corrected or estimated

Checks are per game and return plain issue dicts:
  {"check_id", "severity", "game_id", "field", "message", ...}
Severity is ERROR / WARN / INFO. run_record_qc() returns (summary, issues).
"""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from jarchive.models import SEGMENT_ORDER, GameRecord


def check_completeness(record: GameRecord) -> list[dict]:
    issues = []
    game_id = record.game_id

    # g_incomplete_load: at least one round (or the players) failed
    if record.incomplete_load:
        issues.append({
            "check_id": "g_incomplete_load",
            "severity": "ERROR",
            "game_id": game_id,
            "field": "incomplete_load",
            "message": "Game did not load completely",
            "source_url": record.source_url,
        })

    # g_round_missing: round absent from the record
    have = {s.segment_type for s in record.segments}
    for segment_type in SEGMENT_ORDER:
        if record.participants and segment_type not in have:
            issues.append({
                "check_id": "g_round_missing",
                "severity": "WARN",
                "game_id": game_id,
                "field": "rounds",
                "message": f"{segment_type.value} round missing",
            })

    # g_players_missing: no contestants read
    if not record.participants:
        issues.append({
            "check_id": "g_players_missing",
            "severity": "ERROR",
            "game_id": game_id,
            "field": "players",
            "message": "No contestants read from page",
        })
    return issues


def check_rounds(record: GameRecord) -> list[dict]:
    issues = []
    game_id = record.game_id
    for segment in record.segments:
        round_name = segment.segment_type.value

        # g_clue_defect: clues dropped while building the round
        for defect in segment.defects:
            issues.append({
                "check_id": "g_clue_defect",
                "severity": "WARN",
                "game_id": game_id,
                "field": round_name,
                "message": defect,
            })

        # g_score_corrected: running total disagreed with the printed scores
        if segment.has_score_correction:
            issues.append({
                "check_id": "g_score_corrected",
                "severity": "INFO",
                "game_id": game_id,
                "field": round_name,
                "message": "Running scores corrected from end-of-round scores",
            })

        # g_never_revealed: clue values are estimates
        hidden = sum(1 for e in segment.events if e.never_revealed)
        if hidden:
            issues.append({
                "check_id": "g_never_revealed",
                "severity": "INFO",
                "game_id": game_id,
                "field": round_name,
                "message": f"{hidden} clue(s) never revealed; values estimated",
                "example_value": hidden,
            })
    return issues


def run_record_qc(records: Iterable[GameRecord]) -> tuple[dict, list[dict]]:
    records = list(records)
    all_issues = []
    for rec in records:
        all_issues.extend(check_completeness(rec))
        all_issues.extend(check_rounds(rec))

    counts_by_check = defaultdict(lambda: {"ERROR": 0, "WARN": 0, "INFO": 0})
    for issue in all_issues:
        counts_by_check[issue["check_id"]][issue["severity"]] += 1

    summary = {
        "total_records": len(records),
        "total_errors": sum(1 for i in all_issues if i["severity"] == "ERROR"),
        "total_warnings": sum(1 for i in all_issues if i["severity"] == "WARN"),
        "total_info": sum(1 for i in all_issues if i["severity"] == "INFO"),
        "incomplete_games": sum(1 for r in records if r.incomplete_load),
        "corrected_rounds": sum(1 for r in records for s in r.segments if s.has_score_correction),
        "counts_by_check": dict(counts_by_check),
    }
    return summary, all_issues


def write_qc_outputs(summary: dict, issues: list[dict], out_dir: Path, prefix: str = "scrape") -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    summary_path = out_dir / f"{prefix}_qc_summary.json"
    with open(summary_path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    issues_path = out_dir / f"{prefix}_qc_issues.jsonl"
    with open(issues_path, "w", encoding="utf-8") as f:
        for issue in issues:
            f.write(json.dumps(issue, ensure_ascii=False) + "\n")
    return [summary_path, issues_path]


def print_qc_summary(summary: dict) -> None:
    print(f"\n{'='*60}")
    print("SCRAPE QC SUMMARY")
    print(f"{'='*60}")
    print(f"Total games:       {summary['total_records']}")
    print(f"Incomplete games:  {summary['incomplete_games']}")
    print(f"Corrected rounds:  {summary['corrected_rounds']}")
    print(f"Total errors:      {summary['total_errors']}")
    print(f"Total warnings:    {summary['total_warnings']}")
    print(f"Total info:        {summary['total_info']}")

    print("\nIssues by check:")
    for check_id, counts in sorted(summary.get("counts_by_check", {}).items()):
        parts = [f"{counts[sev]} {sev}" for sev in ("ERROR", "WARN", "INFO") if counts.get(sev)]
        if parts:
            print(f"  {check_id}: {', '.join(parts)}")
    print(f"{'='*60}\n")
