"""
JC69 (Jukes-Cantor 1969) distance between encoded nucleotide sequences.

    b = 1 - 4/3 * p          (p: weighted proportion of differing sites)
    d = -3/4 * ln(b)
    d = 3/4 * alpha * (b^(-1/alpha) - 1)    (gamma-distributed rates)

Distances that come out negative or undefined (p >= 0.75) are reported as 0.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from orfphase.core.encoding import GAP_CODE, alignment_to_codes
from orfphase.errors import DistanceError
from orfphase.schemas.sequences import Alignment
from orfphase.utils.alphabet import GAP_SYMBOLS

logger = logging.getLogger(__name__)


def selected_sites(
    alignment: Alignment,
    weights: Optional[Sequence[float]] = None,
    remove_gaps: bool = True,
) -> Tuple[float, np.ndarray]:
    """
    Return the (weighted) number of selected sites and the boolean site mask.

    With remove_gaps, every column holding a gap in any sequence is excluded.
    """
    mask = np.ones(alignment.length, dtype=bool)
    if remove_gaps:
        for rec in alignment.sequences:
            gaps = np.fromiter((ch in GAP_SYMBOLS for ch in rec.sequence), dtype=bool, count=rec.length)
            mask &= ~gaps
    if weights is None:
        return float(mask.sum()), mask
    w = np.asarray(weights, dtype=float)
    return float(w[mask].sum()), mask


def count_diffs(
    seq1: np.ndarray,
    seq2: np.ndarray,
    mask: Optional[np.ndarray] = None,
    weights: Optional[Sequence[float]] = None,
) -> Tuple[float, float]:
    """Weighted number of differences and of compared sites."""
    if len(seq1) != len(seq2):
        raise DistanceError(f"Sequences have different lengths: {len(seq1)} != {len(seq2)}")
    keep = (seq1 != GAP_CODE) & (seq2 != GAP_CODE)
    if mask is not None:
        keep &= mask
    w = np.ones(len(seq1)) if weights is None else np.asarray(weights, dtype=float)
    total = float(w[keep].sum())
    diff = float(w[keep & (seq1 != seq2)].sum())
    return diff, total


def jc69_distance(
    seq1: np.ndarray,
    seq2: np.ndarray,
    mask: Optional[np.ndarray] = None,
    weights: Optional[Sequence[float]] = None,
    gamma: bool = False,
    alpha: float = 0.0,
) -> float:
    diff, total = count_diffs(seq1, seq2, mask, weights)
    if total <= 0:
        raise DistanceError("No comparable site between the two sequences")
    p = diff / total
    b = 1.0 - 4.0 * p / 3.0
    if b <= 0:
        logger.debug("JC69 undefined for p=%.3f, reporting 0", p)
        return 0.0
    if gamma:
        if alpha <= 0:
            raise DistanceError(f"Gamma shape parameter must be positive: {alpha}")
        dist = 0.75 * alpha * (math.pow(b, -1.0 / alpha) - 1.0)
    else:
        dist = -0.75 * math.log(b)
    if dist > 0:
        return dist
    return 0.0


class JCModel:
    """JC69 model initialised on one alignment (site mask + encoded rows)."""

    def __init__(self, remove_gaps: bool = True):
        self.remove_gaps = remove_gaps
        self.num_sites = 0.0
        self.selected: Optional[np.ndarray] = None
        self.gamma = False
        self.alpha = 0.0
        self.codes: List[np.ndarray] = []

    def init_model(
        self,
        alignment: Alignment,
        weights: Optional[Sequence[float]] = None,
        gamma: bool = False,
        alpha: float = 0.0,
    ) -> None:
        self.gamma = gamma
        self.alpha = alpha
        self.num_sites, self.selected = selected_sites(alignment, weights, self.remove_gaps)
        self.codes = alignment_to_codes(alignment)

    def sequence(self, i: int) -> np.ndarray:
        """The i-th sequence of the alignment, encoded."""
        if i < 0 or i >= len(self.codes):
            raise IndexError(f"This sequence does not exist: {i}")
        return self.codes[i]

    def distance(
        self,
        seq1: np.ndarray,
        seq2: np.ndarray,
        weights: Optional[Sequence[float]] = None,
    ) -> float:
        return jc69_distance(seq1, seq2, self.selected, weights, self.gamma, self.alpha)
