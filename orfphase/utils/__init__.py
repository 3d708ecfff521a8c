"""
Utility modules for ORF phasing.

Modules:
- alphabet: Pure alphabet classification
- translation: Translation helpers (standard genetic code)
- sequence_io: FASTA / phylip reading and writing
"""

from orfphase.utils.alphabet import detect_alphabet, NUCLEOTIDE, AMINO, UNKNOWN
from orfphase.utils.translation import (
    translate,
    reverse_complement,
    STANDARD_CODON_TABLE,
)

__all__ = [
    "detect_alphabet",
    "NUCLEOTIDE",
    "AMINO",
    "UNKNOWN",
    "translate",
    "reverse_complement",
    "STANDARD_CODON_TABLE",
]
