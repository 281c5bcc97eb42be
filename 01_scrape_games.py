#!/usr/bin/env python3
"""
01_scrape_games.py — Stage 1: Scrape J!Archive games into JSON

This script:
- Reads the list of seasons from J!Archive (optionally filtered by --season)
- Downloads every game page in each season (optionally only --game-id)
- Builds a game record per page: players, rounds, clues, responses and the
  running score after every clue
- Writes one JSON file per season (or one file for everything)
- Runs scrape QC and reports games that failed to load, leaving out games
  J!Archive is known to have incomplete

Output: out/<season_name>.json or out/jeopardy_all_seasons.json
        out/scrape_qc_summary.json, out/scrape_qc_issues.jsonl
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from jarchive.config import ALL_SEASONS_URL, LOG_FILE, LOG_FORMAT, OUT
from jarchive.fetch import fetch_document, make_session
from jarchive.known_defects import KnownIncompleteGames
from jarchive.parsing import query_param_int
from jarchive.qc import print_qc_summary, run_record_qc, write_qc_outputs
from jarchive.records import build_game_record
from jarchive.seasons import parse_season_games, parse_season_list, select_seasons
from jarchive.serialize import write_seasons_json


def process_season(session, season, game_ids: set[int]) -> list[str]:
    """Fill season.games; return URLs of games that failed to load cleanly."""
    failed = []
    season_doc = fetch_document(session, season.url)
    if season_doc is None:
        logging.error(f"*** Could not download season page {season.url}")
        return failed

    for link in parse_season_games(season_doc, season.url):
        if game_ids and query_param_int(link.url, "game_id") not in game_ids:
            continue

        game_doc = fetch_document(session, link.url)
        if game_doc is None:
            failed.append(link.url)
            continue
        logging.info(f"Downloaded Game Url - {link.url}")

        try:
            game = build_game_record(game_doc, link.url, link.description)
        except Exception:
            logging.exception(f"*** Failed to Process Game for Url - {link.url}")
            failed.append(link.url)
            continue

        season.games.append(game)
        logging.info(f"Successfully Processed Game - {game}")
        if game.incomplete_load:
            failed.append(link.url)
    return failed


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Scrape J!Archive games into JSON.")
    ap.add_argument("--out", type=Path, default=OUT, help="output directory (default: ./out)")
    ap.add_argument("--season", action="append", default=[], help='season name to scrape, e.g. "Season 20" (repeatable)')
    ap.add_argument("--game-id", type=int, action="append", default=[], help="only scrape these game ids (repeatable)")
    ap.add_argument("--single-file", action="store_true", help="write jeopardy_all_seasons.json instead of one file per season")
    ap.add_argument("--known-incomplete", type=Path, default=None, help="CSV of extra known-incomplete game ids")
    ap.add_argument("--verbose", action="store_true", help="debug logging")
    return ap.parse_args()


def main():
    args = parse_args()
    args.out.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(args.out / LOG_FILE),
            logging.StreamHandler(),
        ],
    )

    known = (
        KnownIncompleteGames.with_csv(args.known_incomplete)
        if args.known_incomplete
        else KnownIncompleteGames()
    )

    session = make_session()
    print("Scraping the Jeopardy! Archive...")
    seasons_doc = fetch_document(session, ALL_SEASONS_URL)
    if seasons_doc is None:
        raise SystemExit(f"Could not download {ALL_SEASONS_URL}")
    seasons = select_seasons(parse_season_list(seasons_doc), args.season)
    print(f"Retrieved list of {len(seasons)} season(s).")

    failed_games = []
    for season in seasons:
        print(f"\n{'='*60}")
        print(f"Processing Games for {season}")
        print(f"{'='*60}")
        failed_games.extend(process_season(session, season, set(args.game_id)))

    for path in write_seasons_json(seasons, args.out, per_season=not args.single_file):
        print(f"Wrote: {path}")

    records = [g for s in seasons for g in s.games]
    qc_summary, qc_issues = run_record_qc(records)
    for path in write_qc_outputs(qc_summary, qc_issues, args.out):
        print(f"Wrote: {path}")
    print_qc_summary(qc_summary)

    unexpected = known.unexpected_failures(failed_games)
    print(f"Games that failed to load ({len(unexpected)} unexpected, "
          f"{len(failed_games) - len(unexpected)} known incomplete):")
    for url in unexpected:
        print(f"  {url}")


if __name__ == "__main__":
    main()
