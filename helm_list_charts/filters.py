"""
Chart entry filtering by name and type.
"""

from __future__ import annotations

from dataclasses import dataclass

from .index import ChartEntry, IndexDocument


@dataclass(frozen=True)
class FilterCriteria:
    """
    Optional predicates applied to index entries.

    Attributes:
        chart_name: Chart name to keep (case-insensitive exact match)
        chart_type: Chart type to keep (case-insensitive exact match)
    """
    chart_name: str | None = None
    chart_type: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.chart_name and not self.chart_type

    def matches_name(self, name: str) -> bool:
        if not self.chart_name:
            return True
        return name.casefold() == self.chart_name.casefold()

    def matches_entry(self, entry: ChartEntry) -> bool:
        if not self.matches_name(entry.name):
            return False
        if not self.chart_type:
            return True
        # Entries without a type never satisfy a type filter
        return entry.chart_type is not None and (
            entry.chart_type.casefold() == self.chart_type.casefold()
        )


def filter_entries(document: IndexDocument, criteria: FilterCriteria) -> IndexDocument:
    """
    Select the entries matching every given criterion.

    Args:
        document: Parsed index document (left untouched)
        criteria: Name/type predicates

    Returns:
        New IndexDocument holding only matching entries; charts with no
        matching entries are omitted
    """
    if criteria.is_empty:
        return document

    kept: dict[str, tuple[ChartEntry, ...]] = {}
    for name, group in document.entries.items():
        if not criteria.matches_name(name):
            continue
        matching = tuple(entry for entry in group if criteria.matches_entry(entry))
        if matching:
            kept[name] = matching

    return IndexDocument(
        entries=kept,
        api_version=document.api_version,
        generated=document.generated,
        skipped=document.skipped,
    )
