from __future__ import annotations

import requests

from jarchive.fetch import fetch_document, fetch_html, make_session


class FakeResponse:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code}", response=self)


class FakeSession:
    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    def get(self, url: str, timeout: int):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_make_session_sets_user_agent() -> None:
    assert "JArchiveScraper" in make_session().headers["User-Agent"]


def test_fetch_returns_page_text() -> None:
    session = FakeSession(FakeResponse(200, "<html></html>"))

    assert fetch_html(session, "u") == "<html></html>"
    assert session.calls == 1


def test_transient_error_is_retried_once() -> None:
    session = FakeSession(FakeResponse(503), FakeResponse(200, "ok"))

    assert fetch_html(session, "u") == "ok"
    assert session.calls == 2


def test_permanent_error_is_not_retried() -> None:
    session = FakeSession(FakeResponse(404))

    assert fetch_html(session, "u") is None
    assert session.calls == 1


def test_network_errors_give_up_after_retry() -> None:
    session = FakeSession(requests.exceptions.ConnectionError("down"), requests.exceptions.Timeout("slow"))

    assert fetch_html(session, "u") is None
    assert session.calls == 2


def test_fetch_document_parses_html() -> None:
    doc = fetch_document(FakeSession(FakeResponse(200, "<div id='game_title'>x</div>")), "u")

    assert doc.find(id="game_title").get_text() == "x"
