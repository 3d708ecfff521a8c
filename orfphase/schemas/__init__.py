"""
Data schemas for sequences and phasing runs.
"""

from orfphase.schemas.sequences import SequenceRecord, SeqBag, Alignment
from orfphase.schemas.phase import PhaseConfig, PhasedSequence, ReferenceORF

__all__ = [
    "SequenceRecord",
    "SeqBag",
    "Alignment",
    "PhaseConfig",
    "PhasedSequence",
    "ReferenceORF",
]
