"""
parsing.py — Small extraction helpers shared by the engine modules

Dollar amounts, dates, query-string ids and element text. Anything that
fails to parse raises ValueParseError carrying the raw text.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional
from urllib.parse import parse_qs, urlparse

from jarchive.errors import ValueParseError

_MONEY_RE = re.compile(r"^(-?)\$?(\d[\d,]*)$")
_WS_RE = re.compile(r"\s+")


def norm_spaces(s: str) -> str:
    return _WS_RE.sub(" ", (s or "").strip())


def text_or_none(node) -> Optional[str]:
    """Extract text from a BeautifulSoup node."""
    if not node:
        return None
    txt = node.get_text(" ", strip=True)
    return norm_spaces(txt) if txt else None


def parse_money(raw: str) -> int:
    """
    Parse a scraped dollar amount into whole dollars.
      "$1,200" -> 1200
      "-$400"  -> -400
    """
    s = (raw or "").strip().replace("−", "-").replace(" ", "")
    m = _MONEY_RE.match(s)
    if not m:
        raise ValueParseError(f"Could not parse dollar amount: {raw!r}", raw)
    amount = int(m.group(2).replace(",", ""))
    return -amount if m.group(1) else amount


def parse_int(raw: str, what: str = "number") -> int:
    s = (raw or "").strip()
    if not s.isdigit():
        raise ValueParseError(f"Could not parse {what}: {raw!r}", raw)
    return int(s)


_DATE_FORMATS = ("%A, %B %d, %Y", "%B %d, %Y", "%Y-%m-%d")


def parse_date(raw: str) -> date:
    """Parse the long air-date form used in game titles, or an ISO date."""
    s = norm_spaces(raw)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValueParseError(f"Could not parse date: {raw!r}", raw)


def query_param_int(url: str, name: str) -> Optional[int]:
    """Read an integer query parameter like game_id=6227; None if absent or not numeric."""
    values = parse_qs(urlparse(url).query).get(name)
    if not values or not values[0].strip().isdigit():
        return None
    return int(values[0].strip())


def unescape_call_name(name: str) -> str:
    """Names with an apostrophe arrive script-escaped (O\\'Brien)."""
    name = name.strip()
    if "'" in name:
        return name.replace("\\", "")
    return name
