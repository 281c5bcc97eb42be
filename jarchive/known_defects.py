"""
Read-only list of games J!Archive is known to have incomplete (at least one
round missing on the site). A failure on one of these is expected, so the
scrape report leaves them out. The engine itself never consults this.

CSV format for extra entries: game_id (one per row, header required).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Optional

from jarchive.parsing import query_param_int

KNOWN_INCOMPLETE_GAME_IDS = frozenset({
    6227, 6226, 6224, 6223, 3576, 3575, 1752, 1748, 1736, 1734,
    1733, 1165, 1139, 1138, 1137, 3552, 1151, 1153, 6361, 1133,
    320, 6359, 6358, 6362, 4983, 1134, 6317, 6085, 4760, 4759,
    4758, 4757, 4767, 4766, 4765, 4764, 4763, 1135, 6054, 6065,
    4960, 5361, 6064, 1132, 5348, 6067, 6061, 6089, 4246, 4264,
    6056, 4284, 4256, 5773, 4273, 4271,
})


class KnownIncompleteGames:
    def __init__(self, game_ids: Optional[Iterable[int]] = None) -> None:
        self._ids = frozenset(KNOWN_INCOMPLETE_GAME_IDS if game_ids is None else game_ids)

    @classmethod
    def with_csv(cls, path: str | Path) -> "KnownIncompleteGames":
        """Default list plus any game ids listed in a CSV file (missing file = defaults only)."""
        ids = set(KNOWN_INCOMPLETE_GAME_IDS)
        p = Path(path)
        if p.exists():
            with p.open("r", encoding="utf-8", newline="") as f:
                for row in csv.DictReader(f):
                    gid = (row.get("game_id") or "").strip()
                    if gid.isdigit():
                        ids.add(int(gid))
        return cls(ids)

    def is_known_incomplete(self, game_url: str) -> bool:
        game_id = query_param_int(game_url, "game_id")
        return game_id is not None and game_id in self._ids

    def __contains__(self, game_url: object) -> bool:
        return isinstance(game_url, str) and self.is_known_incomplete(game_url)

    def __len__(self) -> int:
        return len(self._ids)

    def unexpected_failures(self, failed_urls: Iterable[str]) -> list[str]:
        """Failed game URLs that aren't on the known-incomplete list."""
        return [url for url in failed_urls if not self.is_known_incomplete(url)]
