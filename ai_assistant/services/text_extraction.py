"""Heuristic extraction of structured coaching content from free-form AI text.

Provider responses have no formal grammar: wording, language (English or
German) and formatting vary between providers and between calls. The helpers
in this module locate labelled sections, bullet lists, quotes and the leading
prose of a response and bound everything they return so the results are safe
to render. They are pure functions and never raise on odd input.
"""
from __future__ import annotations

import re
from typing import Iterable, Sequence

DEFAULT_ANALYSIS = "Unable to generate analysis at this time. Please try again later."
DEFAULT_MESSAGE = "You're doing great! Keep up the excellent work with your fitness journey."

MAX_ANALYSIS_LENGTH = 400
MAX_ANALYSIS_SENTENCES = 4
MIN_SECTION_LENGTH = 20
MAX_FALLBACK_LINES = 5

MAX_MESSAGE_LENGTH = 300
MAX_MESSAGE_SENTENCES = 3
MIN_EMBEDDED_QUOTE_LENGTH = 20

MIN_ITEM_LENGTH = 15
MAX_ITEM_LENGTH = 200
MAX_LIST_ITEMS = 5

MAX_TIP_LENGTH = 150
MAX_TIPS = 3

MIN_QUOTE_LENGTH = 15
MAX_QUOTE_LENGTH = 150
MOTIVATION_KEYWORDS = ("success", "achieve", "goal", "dream", "believe", "strong", "push", "better")

MESSAGE_STOP_PREFIXES = ("quote:", "tips:", "actionable", "1.", "2.")

_BULLET_CHARS = "-*•12345. \t"
_QUOTE_TRIM_CHARS = " \t\r\"“”-*"
_QUOTED_SPAN = re.compile(r'"([^"]{10,})"')
_QUOTE_LABEL = re.compile(r"quote:", re.IGNORECASE)
_TIPS_LABEL = re.compile(r"tips:", re.IGNORECASE)
_ACTIONABLE_LABEL = re.compile(r"actionable", re.IGNORECASE)


def _search(text: str, needle: str, start: int = 0) -> re.Match[str] | None:
    """Case-insensitive literal search that keeps offsets into the original text."""
    return re.compile(re.escape(needle), re.IGNORECASE).search(text, start)


def _earliest_index(text: str, markers: Iterable[str]) -> int | None:
    positions = [match.start() for match in (_search(text, marker) for marker in markers) if match]
    return min(positions) if positions else None


def _non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def clean_list_item(line: str) -> str:
    """Strip bullets, numbering and surrounding whitespace from a list line."""
    return line.strip().lstrip(_BULLET_CHARS).strip()


def bound_text(text: str, max_length: int, max_sentences: int) -> str:
    """Shorten text longer than ``max_length`` to its first sentences.

    Text within the limit is returned untouched. Otherwise the first
    ``max_sentences`` period separated sentences are kept and terminated with
    a period; if that is still too long the text is cut at a word boundary.
    """
    if len(text) <= max_length:
        return text

    sentences = [piece.strip() for piece in text.split(".") if piece.strip()]
    bounded = ". ".join(sentences[:max_sentences]) + "." if sentences else ""
    if len(bounded) <= max_length:
        return bounded

    head = bounded[: max_length - 1]
    if " " in head:
        head = head.rsplit(" ", 1)[0]
    return head.rstrip(" .,;:!?-") + "."


def _scan_leading_lines(raw_text: str, stop_markers: Sequence[str]) -> str:
    lowered_markers = [marker.lower() for marker in stop_markers]
    collected: list[str] = []
    for line in _non_empty_lines(raw_text):
        if any(line.lower().startswith(marker) for marker in lowered_markers):
            break
        collected.append(line)
        if len(collected) >= MAX_FALLBACK_LINES:
            break
    return " ".join(collected)


def extract_section(
    raw_text: str | None,
    candidate_headers: Sequence[str],
    stop_markers: Sequence[str],
) -> str:
    """Return the bounded content of the first valid labelled section.

    Headers are tried in priority order. A section runs from the first
    occurrence of its header to the earliest stop marker and must be longer
    than 20 characters to count. Without a valid section the leading lines of
    the response are used, and without those the default analysis sentence.
    """
    if not raw_text or not raw_text.strip():
        return DEFAULT_ANALYSIS

    for header in candidate_headers:
        match = _search(raw_text, header)
        if match is None:
            continue

        section = raw_text[match.end():]
        stop = _earliest_index(section, stop_markers)
        if stop is not None:
            section = section[:stop]
        section = section.strip()

        if len(section) > MIN_SECTION_LENGTH:
            bounded = bound_text(section, MAX_ANALYSIS_LENGTH, MAX_ANALYSIS_SENTENCES)
            if len(bounded) >= MIN_SECTION_LENGTH:
                return bounded

    leading = bound_text(
        _scan_leading_lines(raw_text, stop_markers),
        MAX_ANALYSIS_LENGTH,
        MAX_ANALYSIS_SENTENCES,
    )
    if len(leading) < MIN_SECTION_LENGTH:
        return DEFAULT_ANALYSIS
    return leading


def _parse_items(section: str, max_length: int, limit: int) -> list[str]:
    items: list[str] = []
    for line in section.split("\n"):
        item = clean_list_item(line)
        if MIN_ITEM_LENGTH < len(item) < max_length:
            items.append(item)
            if len(items) >= limit:
                break
    return items


def extract_list(
    raw_text: str | None,
    section_headers: Sequence[str],
    boundary_headers: Sequence[str],
) -> list[str] | None:
    """Return up to five cleaned items from the first labelled list with content.

    A list section ends at the nearest occurrence of any of
    ``boundary_headers`` other than its own header, so an insights list never
    runs into a following recommendations block regardless of which
    vocabulary the provider used. Returns ``None`` when no header yields a
    valid item.
    """
    if not raw_text or not raw_text.strip():
        return None

    for header in section_headers:
        match = _search(raw_text, header)
        if match is None:
            continue

        section = raw_text[match.end():]
        others = [other for other in boundary_headers if other.lower() != header.lower()]
        boundary = _earliest_index(section, others)
        if boundary is not None:
            section = section[:boundary]

        items = _parse_items(section, MAX_ITEM_LENGTH, MAX_LIST_ITEMS)
        if items:
            return items

    return None


def extract_quote(raw_text: str | None) -> str | None:
    """Find a short inspirational quote in the response.

    Double quoted spans are accepted only when they contain a motivational
    keyword, which filters out quoted technical text such as error messages.
    A ``Quote:`` label is used as a second chance.
    """
    if not raw_text or not raw_text.strip():
        return None

    for match in _QUOTED_SPAN.finditer(raw_text):
        quote = match.group(1).strip()
        if MIN_QUOTE_LENGTH <= len(quote) <= MAX_QUOTE_LENGTH and any(
            keyword in quote for keyword in MOTIVATION_KEYWORDS
        ):
            return quote

    label = _QUOTE_LABEL.search(raw_text)
    if label is not None:
        quote = raw_text[label.end():].split("\n", 1)[0].strip(_QUOTE_TRIM_CHARS)
        if MIN_QUOTE_LENGTH <= len(quote) <= MAX_QUOTE_LENGTH:
            return quote

    return None


def _is_embedded_quote(line: str) -> bool:
    return len(line) >= MIN_EMBEDDED_QUOTE_LENGTH and line.startswith('"') and line.endswith('"')


def extract_message(raw_text: str | None) -> str:
    """Return the leading prose of a response, stopping at quote/tip sections."""
    if not raw_text or not raw_text.strip():
        return DEFAULT_MESSAGE

    collected: list[str] = []
    for line in _non_empty_lines(raw_text):
        if line.lower().startswith(MESSAGE_STOP_PREFIXES):
            break
        if _is_embedded_quote(line):
            continue
        collected.append(line)

    message = " ".join(collected) if collected else DEFAULT_MESSAGE
    message = bound_text(message, MAX_MESSAGE_LENGTH, MAX_MESSAGE_SENTENCES)
    return message or DEFAULT_MESSAGE


def extract_tips(raw_text: str | None) -> list[str] | None:
    """Return up to three actionable tips following a ``Tips:`` label."""
    if not raw_text or not raw_text.strip():
        return None

    label = _TIPS_LABEL.search(raw_text)
    if label is not None:
        section = raw_text[label.end():]
    else:
        actionable = _ACTIONABLE_LABEL.search(raw_text)
        if actionable is None:
            return None
        section = raw_text[actionable.start():]

    tips: list[str] = []
    for line in section.split("\n"):
        tip = clean_list_item(line)
        if MIN_ITEM_LENGTH < len(tip) < MAX_TIP_LENGTH and not tip.lower().startswith("quote"):
            tips.append(tip)
            if len(tips) >= MAX_TIPS:
                break

    return tips or None
