#!/usr/bin/env python3
# src/multialign/domain/models/pairwise_alignment.py

"""
Domain model for the pairwise pose score matrix.
"""

import threading
from typing import Dict, Iterator, Optional, Tuple, Union

from .ligand import UniquePoseID
from .pose_pair import LigandPair, PosePair

PairKey = Union[PosePair, Tuple[UniquePoseID, UniquePoseID]]


def _as_pose_pair(key: PairKey) -> PosePair:
    if isinstance(key, PosePair):
        return key
    first, second = key
    return PosePair(first, second)


class PairwiseAlignment:
    """Maps unordered pose pairs to a compatibility score in [0, 1].

    Keys may be given as a PosePair or as two poses in either order. Inserts
    are serialized by a single lock; an existing entry is never overwritten.
    """

    def __init__(self, scores: Optional[Dict[PosePair, float]] = None):
        """
        Initialize the matrix.

        Args:
            scores: Optional initial entries
        """
        self._scores: Dict[PosePair, float] = {}
        self._lock = threading.Lock()
        for pair, score in (scores or {}).items():
            self.insert(pair, score)

    def insert(self, key: PairKey, score: float) -> bool:
        """
        Insert a score unless the pair is already present.

        Args:
            key: Pose pair in any order
            score: Compatibility score

        Returns:
            True if the entry was added
        """
        pair = _as_pose_pair(key)
        with self._lock:
            if pair in self._scores:
                return False
            self._scores[pair] = float(score)
            return True

    def get(self, key: PairKey) -> Optional[float]:
        """Return the score of a pair or None if it was never computed."""
        return self._scores.get(_as_pose_pair(key))

    def lookup(self, first: UniquePoseID, second: UniquePoseID) -> float:
        """Return the score for two poses given in any order."""
        return self[PosePair(first, second)]

    def pairs_for(self, ligand_pair: LigandPair) -> Iterator[Tuple[PosePair, float]]:
        """Iterate over the entries of a single ligand pair."""
        for pair, score in list(self._scores.items()):
            if pair.ligand_pair == ligand_pair:
                yield pair, score

    def items(self):
        return list(self._scores.items())

    def __getitem__(self, key: PairKey) -> float:
        pair = _as_pose_pair(key)
        try:
            return self._scores[pair]
        except KeyError:
            raise KeyError(f"No score recorded for {pair}") from None

    def __contains__(self, key: PairKey) -> bool:
        return _as_pose_pair(key) in self._scores

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[PosePair]:
        return iter(list(self._scores))
