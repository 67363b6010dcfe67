"""Item parsing: turns already-fetched page content into :class:`Item` lists.

Nothing here touches the network.  ``parse_modal_rows`` reads row handles that
the browser session located, tolerating rows that fail to read; the regex
helpers work on plain strings.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from planner_extractor.extraction.models import UNKNOWN, Item, RowHandle

logger = logging.getLogger(__name__)

# DDD.DDD.DD with "." or "-" separators, not embedded in a longer digit run.
_ARTICLE_RE = re.compile(r"(?<!\d)(\d{3})[.\-](\d{3})[.\-](\d{2})(?!\d)")
_WS_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def classify_gamme(text: str, gammes: Sequence[str]) -> str:
    """Return the first catalogue entry contained in *text* (case-insensitive).

    >>> classify_gamme("Meuble METOD 60x80", ["METOD"])
    'METOD'
    """
    upper = text.upper()
    for gamme in gammes:
        if gamme.upper() in upper:
            return gamme
    return UNKNOWN


def normalize_article_number(raw: str) -> str | None:
    """Return *raw* in canonical ``DDD.DDD.DD`` form, or ``None`` if it is not one."""
    match = _ARTICLE_RE.fullmatch(raw.strip())
    if match is None:
        return None
    return ".".join(match.groups())


def _dedupe(items: Iterable[Item]) -> List[Item]:
    seen: set[str] = set()
    unique: List[Item] = []
    for item in items:
        if item.identity_key in seen:
            continue
        seen.add(item.identity_key)
        unique.append(item)
    return unique


# ---------------------------------------------------------------------------
# Scoped-DOM parsing
# ---------------------------------------------------------------------------

def parse_modal_rows(
    rows: Sequence[RowHandle],
    gammes: Sequence[str],
    read_timeout_ms: float,
) -> List[Item]:
    """Build one item per readable, non-blank row, classified by product line.

    A row that raises while being read (detached, timed out) is skipped; the
    remaining rows are still parsed.  Rows with identical text collapse onto
    the first occurrence.
    """
    items: List[Item] = []
    for index, row in enumerate(rows):
        try:
            text = row.text_content(timeout=read_timeout_ms)
        except Exception as exc:
            logger.debug("Skipping unreadable row %d: %s", index, exc)
            continue
        text = (text or "").strip()
        if not text:
            continue
        items.append(Item(raw_name=text, gamme=classify_gamme(text, gammes), qty=1))
    return _dedupe(items)


# ---------------------------------------------------------------------------
# Full-text regex parsing
# ---------------------------------------------------------------------------

def parse_article_numbers(text: str, window: int) -> List[Item]:
    """Scan *text* for article numbers and keep the first occurrence of each.

    ``raw_name`` is the whitespace-collapsed slice of *window* characters on
    either side of the match.
    """
    items: List[Item] = []
    seen: set[str] = set()
    for match in _ARTICLE_RE.finditer(text):
        article = normalize_article_number(match.group(0))
        if article is None or article in seen:
            continue
        seen.add(article)
        start = max(0, match.start() - window)
        context = collapse_whitespace(text[start:match.end() + window])
        items.append(Item(raw_name=context or UNKNOWN, article_number=article))
    return items


def parse_page_content(text: str, html: str, window: int) -> List[Item]:
    """Parse visible page text followed by serialised markup as one document."""
    return parse_article_numbers(f"{text}\n{html}", window)
