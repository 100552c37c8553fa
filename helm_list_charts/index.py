"""
Chart repository index parsing.

Decodes a Helm repository index.yaml into an immutable IndexDocument,
normalizing optional fields and dropping entries whose version is not a
semantic version.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .common import ListChartsError
from .versions import InvalidVersion, SemVer

logger = logging.getLogger(__name__)

# Implicit tags whose native values would lose the scalar's source text
NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")


class IndexLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric-looking scalars as strings (1.10 stays "1.10")."""
    pass


IndexLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class ParseError(ListChartsError):
    """Raised when the index document cannot be decoded."""
    pass


@dataclass(frozen=True)
class ChartEntry:
    """
    A single chart version listed in the index.

    Attributes:
        name: Chart name
        version: Parsed semantic version
        version_text: Version as written in the index
        app_version: Version of the packaged application
        description: One-line chart description
        chart_type: Chart type ("application" or "library")
        created: Creation timestamp (datetime, or raw text if YAML left it a string)
        kube_version: Kubernetes version constraint
    """
    name: str
    version: SemVer
    version_text: str
    app_version: str | None = None
    description: str | None = None
    chart_type: str | None = None
    created: datetime.datetime | str | None = None
    kube_version: str | None = None


@dataclass(frozen=True)
class IndexDocument:
    """
    Parsed index document.

    Attributes:
        entries: Chart name -> entries in document order
        api_version: Index apiVersion, if present
        generated: Index generation timestamp, if present
        skipped: Messages for entries dropped while parsing
    """
    entries: Mapping[str, tuple[ChartEntry, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    api_version: str | None = None
    generated: datetime.datetime | str | None = None
    skipped: tuple[str, ...] = ()

    def __post_init__(self):
        """Freeze the entries mapping and check group keys."""
        frozen = {name: tuple(group) for name, group in self.entries.items()}
        for name, group in frozen.items():
            for entry in group:
                if entry.name != name:
                    raise ValueError(
                        f"Entry {entry.name!r} filed under chart {name!r}"
                    )
        object.__setattr__(self, "entries", MappingProxyType(frozen))

    def __len__(self) -> int:
        return sum(len(group) for group in self.entries.values())

    def chart_names(self) -> list[str]:
        return list(self.entries)


def _optional_text(value: Any) -> str | None:
    """Coerce an optional scalar field to text."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_created(value: Any) -> datetime.datetime | str | None:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    return _optional_text(value)


def _load_yaml(raw: bytes | str) -> Any:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Index document is not valid UTF-8: {e}") from e
    try:
        return yaml.load(raw, Loader=IndexLoader)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML index file: {e}") from e


def parse_entry(chart_name: str, data: Any) -> ChartEntry:
    """
    Build a ChartEntry from one raw index record.

    Args:
        chart_name: Key of the chart group the record was found under
        data: Raw mapping decoded from YAML

    Returns:
        ChartEntry

    Raises:
        ParseError: If the record is malformed or lacks a version
        InvalidVersion: If the version is not a semantic version
    """
    if not isinstance(data, dict):
        raise ParseError(f"Chart {chart_name!r}: entry is not a mapping")

    name = _optional_text(data.get("name")) or chart_name
    if name != chart_name:
        raise ParseError(
            f"Chart {chart_name!r}: entry is named {name!r}"
        )

    version_text = _optional_text(data.get("version"))
    if version_text is None:
        raise ParseError(f"Chart {chart_name!r}: entry has no version")

    return ChartEntry(
        name=name,
        version=SemVer.parse(version_text),
        version_text=version_text,
        app_version=_optional_text(data.get("appVersion")),
        description=_optional_text(data.get("description")),
        chart_type=_optional_text(data.get("type")),
        created=_optional_created(data.get("created")),
        kube_version=_optional_text(data.get("kubeVersion")),
    )


def parse_index(raw: bytes | str, strict: bool = False) -> IndexDocument:
    """
    Parse a repository index document.

    Args:
        raw: index.yaml content (UTF-8 bytes or text)
        strict: Fail on entries with an invalid version instead of skipping them

    Returns:
        IndexDocument with only valid entries

    Raises:
        ParseError: If the document is not a usable index
    """
    data = _load_yaml(raw)
    if not isinstance(data, dict):
        raise ParseError("Index document is not a YAML mapping")

    raw_entries = data.get("entries")
    if raw_entries is None:
        raise ParseError("Index document has no 'entries' section")
    if not isinstance(raw_entries, dict):
        raise ParseError("Index 'entries' section is not a mapping")

    entries: dict[str, list[ChartEntry]] = {}
    skipped: list[str] = []

    for key, records in raw_entries.items():
        chart_name = str(key)
        if records is None:
            continue
        if not isinstance(records, list):
            raise ParseError(f"Chart {chart_name!r}: versions are not a list")

        for record in records:
            try:
                entry = parse_entry(chart_name, record)
            except InvalidVersion as e:
                if strict:
                    raise ParseError(f"Chart {chart_name!r}: {e}") from e
                message = f"Skipping chart {chart_name!r}: {e}"
                logger.warning(message)
                skipped.append(message)
                continue
            entries.setdefault(chart_name, []).append(entry)

    logger.debug(
        f"Parsed {sum(len(g) for g in entries.values())} entries "
        f"across {len(entries)} charts ({len(skipped)} skipped)"
    )

    return IndexDocument(
        entries={name: tuple(group) for name, group in entries.items()},
        api_version=_optional_text(data.get("apiVersion")),
        generated=_optional_created(data.get("generated")),
        skipped=tuple(skipped),
    )
