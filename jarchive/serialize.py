"""
serialize.py — GameRecord / Season -> JSON

Defaults are left out to keep the files small: None, False, 0 and empty
lists never appear. Most responses are correct, so only wrong ones carry
a flag ("is_incorrect": true). Dates are written as YYYY-MM-DD, round
types as their display names.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from jarchive.models import Category, Event, GameRecord, Participant, ParticipantRef, Response, Season, Segment
from jarchive.snapshot import ScoreSnapshot

_UNSAFE_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1F]')


def _is_default(v: Any) -> bool:
    if v is None or v is False:
        return True
    if isinstance(v, int) and not isinstance(v, bool):
        return v == 0
    return isinstance(v, (list, dict, str)) and not v


def prune(value: Any) -> Any:
    """Drop None/False/0/empty values from nested dicts and lists."""
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            v = prune(v)
            if not _is_default(v):
                out[k] = v
        return out
    if isinstance(value, list):
        return [prune(v) for v in value]
    return value


def _player(ref: ParticipantRef) -> dict:
    return {
        "player_id": ref.player_id,
        "call_name": ref.call_name,
        "team_name": ref.team_name,
    }


def snapshot_to_list(snapshot: Optional[ScoreSnapshot], refs: Mapping[int, ParticipantRef]) -> Optional[list]:
    if snapshot is None:
        return None
    rows = []
    for pid, amount in snapshot.items():
        ref = refs.get(pid) or ParticipantRef(player_id=pid, call_name=None)
        rows.append({"player": _player(ref), "amount": amount})
    return rows


def participant_to_dict(p: Participant) -> dict:
    return {
        "player_id": p.player_id,
        "name": p.name,
        "call_name": p.call_name,
        "description": p.description,
        "team_name": p.team_name,
        "segment_played": p.segment_played.value if p.segment_played else None,
    }


def category_to_dict(c: Category) -> dict:
    return {"name": c.name, "position": c.position}


def response_to_dict(r: Response) -> dict:
    return {
        "order": r.order,
        "player": _player(r.participant),
        "response": r.text,
        "wager": r.wager,
        "is_incorrect": not r.is_correct,
    }


def event_to_dict(e: Event, refs: Mapping[int, ParticipantRef]) -> dict:
    return {
        "order": e.order,
        "category": category_to_dict(e.category),
        "row": e.row,
        "value": e.value,
        "question": e.text,
        "media_url": e.media_url,
        "is_daily_double": e.is_daily_double,
        "never_revealed": e.never_revealed,
        "presenter_comment": e.presenter_comment,
        "correct_response": e.correct_response,
        "scores": snapshot_to_list(e.snapshot_after, refs),
        "responses": [response_to_dict(r) for r in sorted(e.responses, key=lambda r: r.order)],
    }


def segment_to_dict(s: Segment, refs: Mapping[int, ParticipantRef]) -> dict:
    return {
        "round_type": s.segment_type.value,
        "categories": [category_to_dict(c) for c in s.categories],
        "clues": [event_to_dict(e, refs) for e in s.events],
        "scores": snapshot_to_list(s.snapshot, refs),
        "has_score_correction": s.has_score_correction,
        "defects": list(s.defects),
    }


def record_to_dict(record: GameRecord) -> dict:
    refs = {p.player_id: p.ref() for p in record.participants}
    return prune({
        "game_id": record.game_id,
        "show_number": record.show_number,
        "air_date": record.air_date.isoformat() if record.air_date else None,
        "description": record.description,
        "source_url": record.source_url,
        "players": [participant_to_dict(p) for p in sorted(record.participants, key=lambda p: p.player_id)],
        "rounds": [segment_to_dict(s, refs) for s in record.segments],
        "final_scores": snapshot_to_list(record.snapshot, refs),
        "incomplete_load": record.incomplete_load,
    })


def season_to_dict(season: Season) -> dict:
    return prune({
        "name": season.name,
        "url": season.url,
        "start_date": season.start_date.isoformat() if season.start_date else None,
        "end_date": season.end_date.isoformat() if season.end_date else None,
        "games": [record_to_dict(g) for g in sorted(season.games, key=_air_date_key)],
    })


def _air_date_key(record: GameRecord):
    return (record.air_date is None, record.air_date or 0, record.game_id or 0)


# ------------------------------------------------------------
# Files
# ------------------------------------------------------------
def make_safe_filename(name: str, replace_char: str = " ") -> str:
    name = _UNSAFE_FILENAME_RE.sub(replace_char, name)
    return "_".join(name.split()).lower()


def write_json(payload: Any, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return out_path


def write_seasons_json(seasons: Iterable[Season], out_dir: Path, per_season: bool = True) -> list[Path]:
    """One <season_name>.json per season, or everything in jeopardy_all_seasons.json."""
    seasons = list(seasons)
    if per_season:
        return [
            write_json([season_to_dict(s)], out_dir / f"{make_safe_filename(s.name)}.json")
            for s in seasons
        ]
    return [write_json([season_to_dict(s) for s in seasons], out_dir / "jeopardy_all_seasons.json")]


def load_seasons_json(paths: Iterable[Path]) -> list[dict]:
    seasons = []
    for p in paths:
        with open(p, "r", encoding="utf-8") as f:
            seasons.extend(json.load(f))
    return seasons
