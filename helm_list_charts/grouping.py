"""
Grouping of chart entries by name and ordering by semantic version.
"""

from __future__ import annotations

from dataclasses import dataclass

from .index import ChartEntry, IndexDocument


@dataclass(frozen=True)
class ChartGroup:
    """All listed versions of one chart, newest first."""
    name: str
    entries: tuple[ChartEntry, ...]


def chart_order_key(name: str) -> tuple[str, str]:
    """Case-insensitive alphabetical order, case-sensitive tie-break."""
    return (name.casefold(), name)


def sort_versions(entries: tuple[ChartEntry, ...] | list[ChartEntry]) -> tuple[ChartEntry, ...]:
    """
    Sort entries by descending semantic version.

    sorted() is stable and reverse=True keeps equal elements in their
    original order, so duplicate versions stay in document order.
    """
    return tuple(sorted(entries, key=lambda entry: entry.version, reverse=True))


def group_and_sort(document: IndexDocument) -> tuple[ChartGroup, ...]:
    """
    Group entries by chart name and order groups and versions.

    Args:
        document: Index document (typically already filtered)

    Returns:
        Chart groups in alphabetical order, each sorted newest version first
    """
    groups: dict[str, list[ChartEntry]] = {}
    for name, group in document.entries.items():
        for entry in group:
            groups.setdefault(entry.name, []).append(entry)

    return tuple(
        ChartGroup(name=name, entries=sort_versions(groups[name]))
        for name in sorted(groups, key=chart_order_key)
        if groups[name]
    )
