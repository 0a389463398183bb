# src/multialign/config.py
"""Configuration for the multi ligand aligner."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_NOF_STARTING_ASSEMBLIES = 10
DEFAULT_NOF_THREADS = 4


class DeficitPeerMode(Enum):
    """Which peers take part in the score deficit of a ligand."""

    # every ligand id in 0..max id, unassigned peers count with score 0
    ALL = "all"
    # only peers that currently hold a pose in the assembly
    ASSIGNED = "assigned"


@dataclass(frozen=True)
class AlignerConfig:
    """Settings for a MultiAligner run.

    Args:
        max_starting_assemblies: Number of best starting assemblies kept for
            local search (K)
        n_threads: Size of the worker pool used for scoring and local search
        deficit_peer_mode: How unassigned peers enter the score deficit
        tie_break_on_missing: Rank equally scored starting assemblies by
            fewer missing ligands
        skip_incomplete_assemblies: Do not refine starting assemblies that
            are missing ligands
        allow_empty_ligands: Accept ligands without poses instead of failing
        max_local_search_iterations: Optional cap on selection steps per run
        local_search_time_limit: Optional wall-clock cap per run in seconds
        show_progress: Display tqdm progress bars
    """

    max_starting_assemblies: int = DEFAULT_NOF_STARTING_ASSEMBLIES
    n_threads: int = DEFAULT_NOF_THREADS
    deficit_peer_mode: DeficitPeerMode = DeficitPeerMode.ALL
    tie_break_on_missing: bool = False
    skip_incomplete_assemblies: bool = False
    allow_empty_ligands: bool = False
    max_local_search_iterations: Optional[int] = None
    local_search_time_limit: Optional[float] = None
    show_progress: bool = False

    def __post_init__(self):
        """Validate settings, failing fast on bad values."""
        if isinstance(self.deficit_peer_mode, str):
            object.__setattr__(
                self, "deficit_peer_mode", _parse_deficit_mode(self.deficit_peer_mode)
            )
        if not isinstance(self.deficit_peer_mode, DeficitPeerMode):
            raise ConfigurationError(
                f"Unknown deficit peer mode: {self.deficit_peer_mode!r}"
            )

        if not _is_int(self.max_starting_assemblies) or self.max_starting_assemblies <= 0:
            raise ConfigurationError(
                "max_starting_assemblies must be a positive integer, "
                f"got {self.max_starting_assemblies!r}"
            )
        if not _is_int(self.n_threads) or self.n_threads <= 0:
            raise ConfigurationError(
                f"n_threads must be a positive integer, got {self.n_threads!r}"
            )
        if self.max_local_search_iterations is not None and (
            not _is_int(self.max_local_search_iterations)
            or self.max_local_search_iterations <= 0
        ):
            raise ConfigurationError(
                "max_local_search_iterations must be a positive integer or None"
            )
        if self.local_search_time_limit is not None and not (
            self.local_search_time_limit > 0
        ):
            raise ConfigurationError(
                "local_search_time_limit must be a positive number of seconds or None"
            )

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "AlignerConfig":
        """
        Build a configuration from a plain mapping, e.g. parsed JSON.

        Args:
            values: Setting names mapped to values

        Returns:
            Validated AlignerConfig

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(values))

    def to_dict(self) -> Dict[str, Any]:
        """Return the settings as a plain mapping."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["deficit_peer_mode"] = self.deficit_peer_mode.value
        return result


def _parse_deficit_mode(value: str) -> DeficitPeerMode:
    try:
        return DeficitPeerMode(value.lower())
    except ValueError:
        raise ConfigurationError(f"Unknown deficit peer mode: {value!r}") from None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
