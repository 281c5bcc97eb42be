"""
tables.py — Flatten scraped seasons (the JSON form) into analysis tables

  clues      one row per clue
  responses  one row per player response
  scores     one row per player per clue (running score after the clue)

Input is the list of season dicts written by serialize.py, so these tables
can be rebuilt from the JSON files without scraping again.
"""

from __future__ import annotations

import re
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment
from openpyxl.utils import get_column_letter

# Excel/openpyxl rejects control chars: 0x00-0x08, 0x0B-0x0C, 0x0E-0x1F
_ILLEGAL_XLSX_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")

CLUE_COLUMNS = [
    "season", "game_id", "show_number", "air_date", "round_type",
    "category", "category_position", "row", "order", "value",
    "is_daily_double", "never_revealed", "question", "correct_response",
    "presenter_comment", "media_url",
]
RESPONSE_COLUMNS = [
    "season", "game_id", "round_type", "order", "category", "value",
    "response_order", "player_id", "call_name", "response", "wager", "is_correct",
]
SCORE_COLUMNS = [
    "season", "game_id", "round_type", "order", "player_id", "call_name", "amount",
]


def sanitize_excel_strings(df: pd.DataFrame) -> pd.DataFrame:
    """Required to write .xlsx safely (not semantic cleaning)."""
    if df.empty:
        return df
    out = df.copy()
    for col in out.columns:
        if pd.api.types.is_string_dtype(out[col]) or out[col].dtype == object:
            out[col] = out[col].apply(
                lambda v: _ILLEGAL_XLSX_RE.sub("", v) if isinstance(v, str) else v
            )
    return out


def _iter_clues(seasons: list[dict]):
    for season in seasons:
        for game in season.get("games", []):
            for rnd in game.get("rounds", []):
                for clue in rnd.get("clues", []):
                    yield season, game, rnd, clue


def build_clues_df(seasons: list[dict]) -> pd.DataFrame:
    rows = []
    for season, game, rnd, clue in _iter_clues(seasons):
        category = clue.get("category", {})
        rows.append({
            "season": season.get("name"),
            "game_id": game.get("game_id"),
            "show_number": game.get("show_number"),
            "air_date": game.get("air_date"),
            "round_type": rnd.get("round_type"),
            "category": category.get("name"),
            "category_position": category.get("position"),
            "row": clue.get("row", 0),
            "order": clue.get("order", 0),
            "value": clue.get("value", 0),
            "is_daily_double": clue.get("is_daily_double", False),
            "never_revealed": clue.get("never_revealed", False),
            "question": clue.get("question"),
            "correct_response": clue.get("correct_response"),
            "presenter_comment": clue.get("presenter_comment"),
            "media_url": clue.get("media_url"),
        })
    return pd.DataFrame(rows, columns=CLUE_COLUMNS)


def build_responses_df(seasons: list[dict]) -> pd.DataFrame:
    rows = []
    for season, game, rnd, clue in _iter_clues(seasons):
        for resp in clue.get("responses", []):
            player = resp.get("player", {})
            rows.append({
                "season": season.get("name"),
                "game_id": game.get("game_id"),
                "round_type": rnd.get("round_type"),
                "order": clue.get("order", 0),
                "category": clue.get("category", {}).get("name"),
                "value": clue.get("value", 0),
                "response_order": resp.get("order", 0),
                "player_id": player.get("player_id"),
                "call_name": player.get("call_name"),
                "response": resp.get("response"),
                "wager": resp.get("wager", 0),
                "is_correct": not resp.get("is_incorrect", False),
            })
    return pd.DataFrame(rows, columns=RESPONSE_COLUMNS)


def build_scores_df(seasons: list[dict]) -> pd.DataFrame:
    rows = []
    for season, game, rnd, clue in _iter_clues(seasons):
        for score in clue.get("scores", []):
            player = score.get("player", {})
            rows.append({
                "season": season.get("name"),
                "game_id": game.get("game_id"),
                "round_type": rnd.get("round_type"),
                "order": clue.get("order", 0),
                "player_id": player.get("player_id"),
                "call_name": player.get("call_name"),
                "amount": score.get("amount", 0),
            })
    return pd.DataFrame(rows, columns=SCORE_COLUMNS)


def build_tables(seasons: list[dict]) -> dict[str, pd.DataFrame]:
    return {
        "clues": build_clues_df(seasons),
        "responses": build_responses_df(seasons),
        "scores": build_scores_df(seasons),
    }


# ------------------------------------------------------------
# Writers
# ------------------------------------------------------------
def write_csvs(tables: dict[str, pd.DataFrame], out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, df in tables.items():
        p = out_dir / f"{name}.csv"
        df.to_csv(p, index=False)
        paths.append(p)
    return paths


def write_workbook(tables: dict[str, pd.DataFrame], out_xlsx: Path) -> Path:
    out_xlsx.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out_xlsx, engine="openpyxl") as xw:
        for name, df in tables.items():
            df = sanitize_excel_strings(df)
            df.to_excel(xw, sheet_name=name, index=False)

            ws = xw.book[name]
            ws.freeze_panes = "A2"
            ws.auto_filter.ref = ws.dimensions

            # Autosize columns based on header + first N rows
            max_rows_scan = min(len(df), 200)
            for col_idx, col_name in enumerate(df.columns, start=1):
                best = len(str(col_name))
                for v in df[col_name].head(max_rows_scan):
                    s = "" if v is None else str(v)
                    best = max(best, len(s))
                ws.column_dimensions[get_column_letter(col_idx)].width = max(10, min(best + 2, 60))

            for cell in ws[1]:
                cell.alignment = Alignment(wrap_text=True, vertical="top")
    return out_xlsx
