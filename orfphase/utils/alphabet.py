"""Pure alphabet classification helpers."""
from __future__ import annotations

from typing import Iterable, Literal

Alphabet = Literal["nucleotide", "amino", "unknown"]

NUCLEOTIDE = "nucleotide"
AMINO = "amino"
UNKNOWN = "unknown"

GAP_SYMBOLS = frozenset("-.?")
NT_SYMBOLS = frozenset("ACGTU")
# IUPAC nucleotide ambiguity codes (N included)
NT_AMBIGUITY = frozenset("RYSWKMBDHVN")
AA_SYMBOLS = frozenset("ARNDCQEGHILKMFPSTWYV")
AA_AMBIGUITY = frozenset("BJZXUO*")


def detect_alphabet(sequences: Iterable[str] | str) -> Alphabet:
    """
    Classify sample content as nucleotide, amino-acid or unknown.

    Nucleotide wins when every symbol is a nucleotide, an IUPAC ambiguity code or
    a gap, so "ACGT" is nucleotide even though it is also a valid protein.
    Empty content is unknown.
    """
    if isinstance(sequences, str):
        sequences = [sequences]
    symbols = set()
    for seq in sequences:
        symbols.update(seq.upper())
    symbols -= GAP_SYMBOLS
    if not symbols:
        return UNKNOWN
    if symbols <= NT_SYMBOLS | NT_AMBIGUITY:
        return NUCLEOTIDE
    if symbols <= AA_SYMBOLS | AA_AMBIGUITY:
        return AMINO
    return UNKNOWN


def strip_gaps(sequence: str) -> str:
    return "".join(ch for ch in sequence if ch not in GAP_SYMBOLS)
