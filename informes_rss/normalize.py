"""Snapshot normalization for scraped informe entries."""

import re
from collections.abc import Iterable

from .models import Item

# XML 1.0 cannot carry C0 control characters other than tab, LF and CR
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def clean_text(text: str | None) -> str:
    """Make scraped text safe for the feed and trim it.

    Line endings are folded to ``\\n`` because XML parsers normalize them on
    read, and a stored description must compare equal on the next run.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _XML_ILLEGAL_RE.sub("", text).strip()


def normalize_pairs(raw_pairs: Iterable[tuple[str, str]], link: str) -> list[Item]:
    """Turn raw (title, description) pairs into candidate items.

    Pairs with an empty title or description after trimming are dropped.
    Duplicate titles are kept in order; identifiers are left empty.

    Args:
        raw_pairs: Extracted (title, description) pairs in page order
        link: Link stored on every candidate

    Returns:
        Candidate items for this run
    """
    items = []
    for raw_title, raw_description in raw_pairs:
        title = clean_text(raw_title)
        description = clean_text(raw_description)
        if not title or not description:
            continue
        items.append(Item(title=title, description=description, link=link))
    return items
