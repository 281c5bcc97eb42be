from __future__ import annotations

from typing import Iterable


class JArchiveError(Exception):
    """Base class for everything the engine raises on a bad page."""


class MalformedDocumentError(JArchiveError):
    """A required element is missing from the page or the clue annotation."""


class ValueParseError(JArchiveError):
    """A dollar amount, date or number scraped from the page did not parse."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class UnresolvedIdentifierError(JArchiveError):
    """Nickname matching ran out of tolerance with nicknames still unassigned."""

    def __init__(self, game_label: str, remaining: Iterable[str]) -> None:
        self.game_label = game_label
        self.remaining = list(remaining)
        super().__init__(
            f"Failed to match a player to their nickname. {game_label} "
            f"Unmatched nicknames: {', '.join(self.remaining)}"
        )
