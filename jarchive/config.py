"""
config.py — Shared constants for the J!Archive scraper.

Paths, request settings and the few domain constants the engine relies on.
Scripts import from here; nothing in this module reads the environment.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

# ========== PATHS ==========
ROOT = Path(".")
OUT = ROOT / "out"
LOG_FILE = "scrape.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"

# ========== SITE ==========
BASE_URL = "http://www.j-archive.com"
ALL_SEASONS_URL = BASE_URL + "/listseasons.php"

USER_AGENT = "JArchiveScraper/1.0 (Archival/Research Purpose)"
REQUEST_TIMEOUT = 30
MAX_RETRIES = 1  # Retry only once after failure
TRANSIENT_RETRY_CODES = {500, 502, 503, 504}  # as opposed to permanent failures

# ========== GAME RULES ==========
# Board values doubled for shows taped after this date.
VALUE_CUTOVER_DATE = date(2001, 11, 26)

# Face value of the first board row per round, before the cutover.
ROW_BASE_VALUES = {
    "Jeopardy": 100,
    "Double Jeopardy": 200,
    "Final Jeopardy": 0,
}

# Nicknames are read from the first score table only: one per podium.
MAX_CALL_NAMES = 3
MAX_MATCH_TOLERANCE = 20
TEAM_GAME_MIN_PLAYERS = 4

PRESENTER_NAMES = {"Alex Trebek", "Alex"}
NO_RESPONSE_NAMES = {"Triple Stumper", "Quadruple Stumper"}
