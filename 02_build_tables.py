#!/usr/bin/env python3
"""
02_build_tables.py — Stage 2: Flat tables from the scraped JSON

This script:
- Reads the season JSON files written by 01_scrape_games.py
- Builds clues / responses / scores tables
- Writes out/tables/{clues,responses,scores}.csv and one workbook with a
  sheet per table

Input: out/*.json (season files)
Output: out/tables/*.csv, Jeopardy_Clues.xlsx
"""

from __future__ import annotations

import argparse
from pathlib import Path

from jarchive.config import OUT, ROOT
from jarchive.serialize import load_seasons_json
from jarchive.tables import build_tables, write_csvs, write_workbook


def find_season_files(in_dir: Path) -> list[Path]:
    return sorted(p for p in in_dir.glob("*.json") if "_qc_" not in p.name)


def main():
    ap = argparse.ArgumentParser(description="Build flat clue/response/score tables from scraped JSON.")
    ap.add_argument("--in-dir", type=Path, default=OUT)
    ap.add_argument("--out-dir", type=Path, default=OUT / "tables")
    ap.add_argument("--xlsx", type=Path, default=ROOT / "Jeopardy_Clues.xlsx")
    args = ap.parse_args()

    files = find_season_files(args.in_dir)
    if not files:
        raise SystemExit(f"No season JSON files found under {args.in_dir}")

    print(f"Reading {len(files)} season file(s) from {args.in_dir}")
    seasons = load_seasons_json(files)
    tables = build_tables(seasons)

    print(f"\n{'='*60}")
    print("VERIFICATION GATE: Stage 2 (Tables)")
    print(f"{'='*60}")
    print(f"Seasons: {len(seasons)}")
    print(f"Games:   {sum(len(s.get('games', [])) for s in seasons)}")
    for name, df in tables.items():
        print(f"  {name:10s}: {len(df):7d} rows")
    print(f"{'='*60}\n")

    for path in write_csvs(tables, args.out_dir):
        print(f"Wrote: {path}")
    print(f"Wrote: {write_workbook(tables, args.xlsx)}")


if __name__ == "__main__":
    main()
