#!/usr/bin/env python3
"""Translation helpers backed by Biopython translation."""
from __future__ import annotations

from Bio.Data.CodonTable import TranslationError
from Bio.Seq import Seq

from orfphase.errors import AlphabetError

# Biopython translation table 1 = Standard genetic code.
STANDARD_CODON_TABLE = 1


def full_codons(dna: str) -> str:
    """Trim to a length divisible by 3 so translation does not include a partial codon."""
    return dna[: len(dna) - (len(dna) % 3)]


def translate(dna: str | Seq, frame: int = 0, table: int = STANDARD_CODON_TABLE) -> str:
    """
    Translate DNA from a frame offset, keeping stop codons as '*'.

    Raises:
        AlphabetError: a codon holds a symbol the genetic code cannot translate.
    """
    dna_str = full_codons(str(dna).upper()[frame:])
    if len(dna_str) < 3:
        return ""
    try:
        return str(Seq(dna_str).translate(table=table))
    except TranslationError as exc:
        raise AlphabetError(f"Cannot translate sequence: {exc}") from exc


def reverse_complement(seq: str) -> str:
    return str(Seq(seq).reverse_complement())
