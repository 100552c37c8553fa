"""
Run configuration.

Command-line arguments and environment variables are resolved once at
startup into immutable config objects that are passed to the pipeline.
"""

from __future__ import annotations

import argparse
import os
import shlex
from dataclasses import dataclass, field
from typing import Mapping

from .common import env_flag


# Environment variables that switch the pager off
NO_PAGER_ENV_VARS = ("NO_PAGER", "HELM_LIST_CHARTS_NO_PAGER")
PAGER_ENV_VAR = "PAGER"

DEFAULT_PAGER = "less"
DEFAULT_PAGER_THRESHOLD = 25
DEFAULT_TIMEOUT_SECONDS = 30.0


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""
    pass


@dataclass(frozen=True)
class PagerConfig:
    """
    Pager settings for the output sink.

    Attributes:
        enabled: Whether long output may be paged
        command: Pager command line, program first
        threshold: Output up to this many lines is never paged
    """
    enabled: bool = True
    command: tuple[str, ...] = (DEFAULT_PAGER,)
    threshold: int = DEFAULT_PAGER_THRESHOLD

    def __post_init__(self):
        """Validate pager settings after initialization."""
        if not self.command:
            raise ConfigError("Pager command must not be empty")
        if self.threshold < 0:
            raise ConfigError(
                f"Invalid pager threshold: {self.threshold}. Must be >= 0"
            )

    @staticmethod
    def from_env(
        environ: Mapping[str, str] | None = None,
        no_pager: bool = False,
    ) -> PagerConfig:
        """
        Resolve pager settings from the environment.

        Args:
            environ: Environment mapping (os.environ if None)
            no_pager: --no-pager was given on the command line

        Returns:
            PagerConfig
        """
        if environ is None:
            environ = os.environ

        disabled = no_pager or any(env_flag(var, environ) for var in NO_PAGER_ENV_VARS)

        pager = environ.get(PAGER_ENV_VAR, "").strip()
        try:
            command = tuple(shlex.split(pager)) if pager else ()
        except ValueError as e:
            raise ConfigError(f"Invalid {PAGER_ENV_VAR} value {pager!r}: {e}") from e

        return PagerConfig(
            enabled=not disabled,
            command=command or (DEFAULT_PAGER,),
        )


@dataclass(frozen=True)
class RunConfig:
    """
    Complete configuration for one listing run.

    Attributes:
        source: Repository URL (index.yaml is appended when missing)
        chart: Chart name filter
        chart_type: Chart type filter
        strict: Fail on entries with invalid versions instead of skipping them
        timeout: Network timeout in seconds
        description_width: Ellipsize descriptions beyond this many characters
        verbose: Enable debug logging
        quiet: Show only errors on stderr
        log_file: File receiving a DEBUG transcript of the run
        pager: Pager settings
    """
    source: str
    chart: str | None = None
    chart_type: str | None = None
    strict: bool = False
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    description_width: int | None = None
    verbose: bool = False
    quiet: bool = False
    log_file: str | None = None
    pager: PagerConfig = field(default_factory=PagerConfig)

    def __post_init__(self):
        """Validate config after initialization."""
        if not self.source or not self.source.strip():
            raise ConfigError("Repository source URL must not be empty")

        if self.timeout <= 0 or self.timeout > 600:
            raise ConfigError(
                f"Invalid timeout: {self.timeout}. Must be between 0 and 600 seconds"
            )

        if self.description_width is not None and self.description_width < 1:
            raise ConfigError(
                f"Invalid description width: {self.description_width}. Must be >= 1"
            )

        if self.verbose and self.quiet:
            raise ConfigError("--verbose and --quiet cannot be combined")

    @staticmethod
    def from_args(
        args: argparse.Namespace,
        environ: Mapping[str, str] | None = None,
    ) -> RunConfig:
        """Create RunConfig from parsed command-line arguments."""
        return RunConfig(
            source=args.source.strip(),
            chart=args.chart or None,
            chart_type=args.chart_type or None,
            strict=args.strict,
            timeout=args.timeout,
            description_width=args.description_width,
            verbose=args.verbose,
            quiet=args.quiet,
            log_file=args.log_file or None,
            pager=PagerConfig.from_env(environ, no_pager=args.no_pager),
        )
