# src/multialign/exceptions.py
"""Exception types raised by the alignment engine."""

from typing import Optional


class MultiAlignError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(MultiAlignError, ValueError):
    """Raised when the engine is configured with invalid values."""


class DegenerateInputError(MultiAlignError, ValueError):
    """Raised when the ligand list cannot be aligned meaningfully."""


class MissingScoreError(MultiAlignError, LookupError):
    """Raised when the geometric oracle cannot score a pose pair.

    Attributes:
        pose_pair: The pair that could not be scored, if known
    """

    def __init__(self, message: str, pose_pair: Optional[object] = None):
        super().__init__(message)
        self.pose_pair = pose_pair
