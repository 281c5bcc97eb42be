"""
responses.py — Right/wrong/commentary extraction from a clue's hover annotation

J!Archive hides the responses the same way the show does: the HTML that
reveals them is packed, script-escaped, into the onmouseover handler of the
clue:

    toggle('clue_J_1_1', 'clue_J_1_1_stuck', '(Ken: What is Rome?)<br />
        (Alex: No.)<br /><em class="correct_response">Paris</em><br /><br />
        <table><tr><td class="wrong">Ken</td><td class="right">Brad</td></tr></table>')

Steps:
  1. split on the single quote and take the third script argument
     (rejoining it if a response itself contained a quote)
  2. un-escape it and parse it as an HTML fragment
  3. collect the presenter comment and wrong answers from the leading
     "(Name: text)" lines, stopping at the first <em>
  4. pick up the correct response
  5. turn the right/wrong cells into Response rows
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Mapping, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from jarchive.config import NO_RESPONSE_NAMES, PRESENTER_NAMES
from jarchive.errors import MalformedDocumentError
from jarchive.models import ParticipantRef, Response
from jarchive.parsing import parse_money, unescape_call_name

# toggle('<id>', '<id>_stuck', '<payload>') splits into exactly this many
# fields on the quote character; the payload is the sixth.
ANNOTATION_FIELD_COUNT = 7
PAYLOAD_FIELD_INDEX = 5

# Shortest utterance worth reading: "(n:a)"
MIN_UTTERANCE_LENGTH = 5


@dataclass
class Annotation:
    presenter_comment: Optional[str]
    wrong_answers: dict[str, str]
    correct_response: str
    fragment: BeautifulSoup = field(repr=False)


# ------------------------------------------------------------
# Payload recovery
# ------------------------------------------------------------
def split_annotation(annotation: str) -> str:
    """Return the payload argument of the toggle() call."""
    fields = (annotation or "").split("'")
    if len(fields) < ANNOTATION_FIELD_COUNT:
        raise MalformedDocumentError(
            f"Clue annotation has {len(fields)} quoted fields, expected {ANNOTATION_FIELD_COUNT}"
        )
    if len(fields) > ANNOTATION_FIELD_COUNT:
        # a quote inside a response split the payload; put it back together
        return "'".join(fields[PAYLOAD_FIELD_INDEX:len(fields) - 1])
    return fields[PAYLOAD_FIELD_INDEX]


def unescape_payload(payload: str) -> str:
    payload = payload.replace("\\'", "'")
    if "<" not in payload and "&lt;" in payload:
        # handed over with the attribute still entity-encoded
        return html.unescape(payload)
    return payload.replace("&quot;", '"')


def parse_utterance(text: str) -> Optional[tuple[str, str]]:
    """
    Parse one "(Name: text)" line into (name, text).
    Falls back to ';' for the occasional typo. None if it isn't an utterance.
    """
    text = text.strip()
    if len(text) <= MIN_UTTERANCE_LENGTH or not (text.startswith("(") and text.endswith(")")):
        return None
    inner = text[1:-1]
    for sep in (":", ";"):
        if sep in inner:
            name, _, said = inner.partition(sep)
            return name.strip(), said.strip()
    return None


def _top_level_tags(fragment: BeautifulSoup) -> list[Tag]:
    return [n for n in fragment.contents if isinstance(n, Tag)]


def extract_annotation(annotation: str, is_final: bool) -> Annotation:
    payload = unescape_payload(split_annotation(annotation))
    fragment = BeautifulSoup(payload, "html.parser")

    presenter_comment = None
    wrong_answers: dict[str, str] = {}

    for node in fragment.contents:
        # once we get to the <em>, we're past the comments/wrong answers
        if isinstance(node, Tag) and node.name == "em":
            break
        if not isinstance(node, NavigableString) or isinstance(node, Comment):
            continue
        parsed = parse_utterance(str(node))
        if parsed is None:
            continue
        speaker, said = parsed
        if speaker in PRESENTER_NAMES:
            if presenter_comment is None:
                presenter_comment = said
        elif speaker not in wrong_answers:
            wrong_answers[speaker] = said

    if is_final:
        tags = _top_level_tags(fragment)
        if not tags:
            raise MalformedDocumentError("Final round annotation has no correct response")
        correct = tags[-1].get_text(" ", strip=True)
    else:
        node = fragment.find(class_="correct_response")
        if node is None:
            raise MalformedDocumentError("Clue annotation has no correct_response element")
        correct = node.get_text(" ", strip=True)

    return Annotation(
        presenter_comment=presenter_comment,
        wrong_answers=wrong_answers,
        correct_response=correct,
        fragment=fragment,
    )


# ------------------------------------------------------------
# Response rows
# ------------------------------------------------------------
def _lookup(roster: Mapping[str, ParticipantRef], name: str) -> ParticipantRef:
    ref = roster.get(name)
    if ref is None:
        raise MalformedDocumentError(f"Response credited to unknown nickname {name!r}")
    return ref


def build_standard_responses(
    annotation: Annotation,
    value: int,
    roster: Mapping[str, ParticipantRef],
) -> list[Response]:
    """Wrong answers first (in page order), then the right one. Everyone risks the clue value."""
    responses = []
    order = 1
    for cell in annotation.fragment.find_all(class_="wrong"):
        name = unescape_call_name(cell.get_text())
        # the buzzer sounded with nobody (or nobody else) answering
        if name in NO_RESPONSE_NAMES:
            continue
        responses.append(
            Response(
                participant=_lookup(roster, name),
                text=annotation.wrong_answers.get(name),
                wager=value,
                is_correct=False,
                order=order,
            )
        )
        order += 1

    right = annotation.fragment.find(class_="right")
    if right is not None:
        name = unescape_call_name(right.get_text())
        responses.append(
            Response(
                participant=_lookup(roster, name),
                text=annotation.correct_response,
                wager=value,
                is_correct=True,
                order=order,
            )
        )
    return responses


def build_final_responses(
    annotation: Annotation,
    roster: Mapping[str, ParticipantRef],
) -> list[Response]:
    """
    Final round responses live in a table:
      <tr><td class="right">Ken</td><td>What is Paris?</td></tr>
      <tr><td>$3,000</td></tr>
    Order is the player's rank in id order; right answers are listed first.
    """
    rank = {
        pid: i
        for i, pid in enumerate(sorted({ref.player_id for ref in roster.values()}), start=1)
    }
    responses = []
    for is_correct, css in ((True, "right"), (False, "wrong")):
        for cell in annotation.fragment.find_all("td", class_=css):
            name = unescape_call_name(cell.get_text())
            if name in NO_RESPONSE_NAMES:
                continue
            ref = _lookup(roster, name)

            answer_cell = cell.find_next_sibling("td")
            text = answer_cell.get_text(" ", strip=True) if answer_cell else None

            row = cell.find_parent("tr")
            wager_row = row.find_next_sibling("tr") if row else None
            wager_cell = wager_row.find("td") if wager_row else None
            if wager_cell is None:
                raise MalformedDocumentError(f"Final round wager missing for {name!r}")
            wager = abs(parse_money(wager_cell.get_text(strip=True)))

            responses.append(
                Response(
                    participant=ref,
                    text=text or None,
                    wager=wager,
                    is_correct=is_correct,
                    order=rank[ref.player_id],
                )
            )
    return responses
