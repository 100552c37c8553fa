"""
helm-list-charts - List the charts published in a Helm chart repository.

Core Modules:
- Retrieval: index.yaml fetching over HTTP(S)
- Parsing: index decoding, semantic version model
- Selection: name/type filtering, grouping and version ordering
- Output: aligned table rendering, pager handling
"""

__version__ = "1.0.0"

# Version info for backward compatibility
VERSION = __version__

from .common import ListChartsError
from .versions import SemVer, InvalidVersion, parse_version, compare_versions
from .fetcher import FetchError, build_index_url, fetch_index
from .index import ChartEntry, IndexDocument, ParseError, parse_index
from .filters import FilterCriteria, filter_entries
from .grouping import ChartGroup, group_and_sort
from .render import RenderedTable, RenderError, render_table, format_created
from .config import ConfigError, PagerConfig, RunConfig
from .pager import Destination, StdoutDestination, PagerDestination, should_page, emit
from .logging_config import setup_logging, get_logger

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Errors
    "ListChartsError",
    "FetchError",
    "ParseError",
    "RenderError",
    "ConfigError",
    "InvalidVersion",
    # Pipeline
    "SemVer",
    "parse_version",
    "compare_versions",
    "build_index_url",
    "fetch_index",
    "ChartEntry",
    "IndexDocument",
    "parse_index",
    "FilterCriteria",
    "filter_entries",
    "ChartGroup",
    "group_and_sort",
    "RenderedTable",
    "render_table",
    "format_created",
    # Output
    "PagerConfig",
    "RunConfig",
    "Destination",
    "StdoutDestination",
    "PagerDestination",
    "should_page",
    "emit",
    # Logging
    "setup_logging",
    "get_logger",
]
