"""
Integer encoding of nucleotide and amino-acid sequences.

Each alphabet is a 256-entry lookup table indexed by ASCII code. Gap and
ambiguity symbols share the GAP_CODE sentinel so numeric code never compares
them as real residues.
"""
from __future__ import annotations

from typing import Dict, List

import numpy as np

from orfphase.errors import AlphabetError
from orfphase.schemas.sequences import Alignment
from orfphase.utils.alphabet import (
    AA_AMBIGUITY,
    AMINO,
    GAP_SYMBOLS,
    NT_AMBIGUITY,
    NUCLEOTIDE,
    Alphabet,
)

CODE_DTYPE = np.int16
GAP_CODE = -1
INVALID_CODE = -2

NT_ORDER = "ACGT"
AA_ORDER = "ARNDCQEGHILKMFPSTWYV"


def _build_table(order: str, sentinels: frozenset, aliases: Dict[str, str]) -> np.ndarray:
    table = np.full(256, INVALID_CODE, dtype=CODE_DTYPE)
    for code, symbol in enumerate(order):
        table[ord(symbol)] = code
        table[ord(symbol.lower())] = code
    for src, dst in aliases.items():
        table[ord(src)] = table[ord(dst)]
        table[ord(src.lower())] = table[ord(dst)]
    for symbol in sentinels:
        table[ord(symbol)] = GAP_CODE
        table[ord(symbol.lower())] = GAP_CODE
    return table


_TABLES = {
    NUCLEOTIDE: _build_table(NT_ORDER, GAP_SYMBOLS | NT_AMBIGUITY, {"U": "T"}),
    AMINO: _build_table(AA_ORDER, GAP_SYMBOLS | AA_AMBIGUITY, {}),
}


def encode(sequence: str, alphabet: Alphabet) -> np.ndarray:
    """
    Map a sequence to integer codes for the given alphabet.

    Raises:
        AlphabetError: unknown alphabet, or a symbol outside the alphabet.
    """
    table = _TABLES.get(alphabet)
    if table is None:
        raise AlphabetError(f"Cannot encode sequences of alphabet {alphabet!r}")
    try:
        raw = np.frombuffer(sequence.encode("ascii"), dtype=np.uint8)
    except UnicodeEncodeError:
        raise AlphabetError(f"Non-ASCII symbol in {alphabet} sequence") from None
    codes = table[raw]
    bad = np.flatnonzero(codes == INVALID_CODE)
    if bad.size:
        symbol = sequence[bad[0]]
        raise AlphabetError(f"Unknown {alphabet} symbol {symbol!r} at position {bad[0]}")
    return codes


def alignment_to_codes(alignment: Alignment) -> List[np.ndarray]:
    return [encode(rec.sequence, alignment.alphabet) for rec in alignment.sequences]
