"""
seasons.py — Find the seasons and the games in each season

listseasons.php:  one table row per season
    <tr><td><a href="showseason.php?season=20">Season 20</a></td>
        <td>2003-09-08 to 2004-07-23</td>...</tr>
showseason.php:   one table row per game
    <tr><td><a href="showgame.php?game_id=4680">#4680, aired 2005-01-03</a></td>
        <td>Ken Jennings vs. ...</td><td>Tournament of Champions final</td></tr>
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from jarchive.config import ALL_SEASONS_URL
from jarchive.errors import MalformedDocumentError, ValueParseError
from jarchive.models import Season
from jarchive.parsing import norm_spaces, parse_date

logger = logging.getLogger(__name__)


@dataclass
class GameLink:
    url: str
    description: str = ""


def parse_season_dates(raw: str) -> tuple[date, date]:
    """
    '1984-09-10 to 1985-06-07' -> (start, end)
    The pilot season reads like '1964? and 1983?'; unknown parts become Jan 1.
    """
    text = norm_spaces(raw)
    if " and " in text:
        text = text.replace(" and ", " to ").replace("?", "-1-1")
    if " to " not in text:
        raise ValueParseError(f"Could not read season dates: {raw!r}", raw)
    start, end = text.split(" to ", 1)
    return parse_date(start), parse_date(end)


def parse_season_list(soup: BeautifulSoup, base_url: str = ALL_SEASONS_URL) -> list[Season]:
    content = soup.find(id="content")
    table = content.find("table") if content else None
    if table is None:
        raise MalformedDocumentError("Season list page has no season table")

    seasons = []
    for tr in table.find_all("tr"):
        anchor = tr.find("a", href=True)
        if anchor is None:
            continue
        # special seasons are wrapped in <i>
        inner = anchor.find(True)
        season = Season(
            name=norm_spaces((inner or anchor).get_text()),
            url=urljoin(base_url, anchor["href"]),
        )
        cell = anchor.find_parent("td")
        dates_cell = cell.find_next_sibling("td") if cell else None
        if dates_cell is not None:
            try:
                season.start_date, season.end_date = parse_season_dates(dates_cell.get_text())
            except ValueParseError as e:
                logger.warning(f"Season {season.name}: {e}")
        seasons.append(season)
    return seasons


def parse_season_games(soup: BeautifulSoup, season_url: str) -> list[GameLink]:
    header = soup.find(class_="season")
    table = header.find_next_sibling("table") if header else None
    if table is None:
        raise MalformedDocumentError(f"Season page has no game table: {season_url}")

    links = []
    for anchor in table.find_all("a", href=True):
        text = anchor.get_text()
        # descriptions link to other games too; game links say when they aired/taped
        if "aired" not in text and "taped" not in text:
            continue
        url = urljoin(season_url, anchor["href"])
        # skip media (jpg, youtube) picked up by the same test
        if "showgame.php" not in url:
            continue
        links.append(GameLink(url=url, description=_game_description(anchor)))
    return links


def _game_description(anchor) -> str:
    cell = anchor.find_parent("td")
    if cell is None:
        return ""
    contestants = cell.find_next_sibling("td")
    desc = contestants.find_next_sibling("td") if contestants else None
    return norm_spaces(desc.get_text()) if desc else ""


def select_seasons(seasons: list[Season], names: Optional[list[str]]) -> list[Season]:
    if not names:
        return seasons
    wanted = {n.lower() for n in names}
    return [s for s in seasons if s.name.lower() in wanted]
