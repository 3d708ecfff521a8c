"""
Core modules for ORF phasing.

Modules:
- encoding: Integer encoding of nucleotide / amino-acid sequences
- distance: JC69 distance
- orf: Longest ORF detection
- phasing: Phasing engine
- report: Tabular summary of phasing results
"""

from orfphase.core.distance import JCModel, jc69_distance
from orfphase.core.encoding import encode, GAP_CODE
from orfphase.core.orf import longest_orf
from orfphase.core.phasing import Phaser, PhaseRun

__all__ = [
    "JCModel",
    "jc69_distance",
    "encode",
    "GAP_CODE",
    "longest_orf",
    "Phaser",
    "PhaseRun",
]
