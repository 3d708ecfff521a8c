"""
orfphase - reading-frame phasing of nucleotide sequences against a reference ORF.

This package provides tools for:
- Parsing and writing phylip-style block alignments
- Encoding sequences and computing JC69 distances
- Detecting the longest open reading frame of a sequence set
- Phasing sequences against a reference ORF (trimmed nt + translated aa output)
"""

__version__ = "0.1.0"

from pathlib import Path

# Package paths
PACKAGE_DIR = Path(__file__).parent
