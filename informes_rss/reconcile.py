"""Reconciliation of a scraped snapshot against the persisted feed.

Items are matched by title only. A title whose description differs from the
stored one, or a title the feed has never seen, counts as changed. Changed
items that are already tracked get the new description and a fresh
identifier; changed titles the feed does not hold yet are appended while the
feed is below its size bound. Everything else is carried over untouched.
"""

from collections.abc import Callable
from dataclasses import replace

from .errors import EntropyError
from .identifiers import generate_identifier
from .models import Item, ReconcileResult


def reconcile(
    persisted: list[Item],
    candidates: list[Item],
    max_items: int,
    generate: Callable[[], str] = generate_identifier,
) -> ReconcileResult:
    """Merge candidates into the persisted feed.

    Args:
        persisted: Items loaded from the feed, in document order
        candidates: Normalized items scraped this run, in page order
        max_items: Bound on the number of distinct titles kept in steady state
        generate: Identifier factory

    Returns:
        ReconcileResult holding the next feed and what changed

    Raises:
        ValueError: If max_items is not positive
        EntropyError: If an identifier cannot be generated
    """
    if max_items <= 0:
        raise ValueError(f"max_items must be positive, got {max_items}")

    latest = _latest_by_title(candidates)
    if not persisted:
        return _bootstrap(latest, generate)

    # Last entry wins when the feed already holds a title twice
    stored = {item.title: item.description for item in persisted}

    changed_titles: dict[str, str] = {}
    for title, candidate in latest.items():
        if stored.get(title) != candidate.description:
            changed_titles[title] = candidate.description

    identifiers: dict[str, str] = {}
    items: list[Item] = []
    for item in persisted:
        if item.title in changed_titles:
            item = replace(
                item,
                description=changed_titles[item.title],
                identifier=_new_identifier(generate),
            )
            identifiers[item.title] = item.identifier
        items.append(item)

    rejected_titles = []
    for title, description in changed_titles.items():
        if title in stored:
            continue
        if len(items) >= max_items:
            rejected_titles.append(title)
            continue
        identifier = _new_identifier(generate)
        items.append(
            Item(
                title=title,
                description=description,
                link=latest[title].link,
                identifier=identifier,
            )
        )
        identifiers[title] = identifier

    return ReconcileResult(
        items=items,
        changed_titles=changed_titles,
        identifiers=identifiers,
        rejected_titles=rejected_titles,
    )


def _latest_by_title(candidates: list[Item]) -> dict[str, Item]:
    """Collapse the snapshot to one candidate per title.

    A repeated title keeps its first position and its last description.
    """
    latest: dict[str, Item] = {}
    for candidate in candidates:
        latest[candidate.title] = candidate
    return latest


def _bootstrap(latest: dict[str, Item], generate: Callable[[], str]) -> ReconcileResult:
    """Seed an empty feed with the whole snapshot; no size bound applies."""
    items: list[Item] = []
    changed_titles: dict[str, str] = {}
    identifiers: dict[str, str] = {}
    for title, candidate in latest.items():
        item = replace(candidate, identifier=_new_identifier(generate))
        items.append(item)
        changed_titles[title] = item.description
        identifiers[title] = item.identifier

    return ReconcileResult(
        items=items,
        changed_titles=changed_titles,
        identifiers=identifiers,
        bootstrap=True,
    )


def _new_identifier(generate: Callable[[], str]) -> str:
    identifier = generate()
    if not identifier:
        raise EntropyError("Identifier generator returned an empty value")
    return identifier
