"""
Longest open reading frame detection over a set of unaligned sequences. Gap symbols
are ignored.

Used to derive a reference ORF when none is supplied. An ORF starts at an ATG
codon and runs to the next in-frame stop codon (included), or to the last full
codon of the sequence when no stop follows.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from orfphase.errors import ReferenceORFError
from orfphase.schemas.sequences import SeqBag, SequenceRecord
from orfphase.utils.alphabet import strip_gaps
from orfphase.utils.translation import reverse_complement, translate

logger = logging.getLogger(__name__)


def frame_orfs(protein: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (aa_start, aa_end) of the longest ORF between consecutive stops.

    Only the first M after a stop opens an ORF, since later ones are nested in it.
    """
    start: Optional[int] = None
    for idx, aa in enumerate(protein):
        if start is None:
            if aa == "M":
                start = idx
        elif aa == "*":
            yield start, idx + 1
            start = None
    if start is not None:
        yield start, len(protein)


def longest_orf(bag: SeqBag, reverse: bool = False) -> SequenceRecord:
    """
    Return the longest ORF of the bag, named after its source sequence.

    Ties keep the first ORF found: sequence order, then forward frames 0-2,
    then reverse-complement frames 0-2, then position.

    Raises:
        ReferenceORFError: no ORF in any sequence.
    """
    best: Optional[SequenceRecord] = None
    best_len = 0

    for rec in bag.sequences:
        seq = strip_gaps(rec.sequence.upper())
        strands = [("+", seq)]
        if reverse:
            strands.append(("-", reverse_complement(seq)))
        for strand, strand_seq in strands:
            for frame in (0, 1, 2):
                protein = translate(strand_seq, frame)
                for aa_start, aa_end in frame_orfs(protein):
                    nt_start = frame + 3 * aa_start
                    nt_end = frame + 3 * aa_end
                    if nt_end - nt_start <= best_len:
                        continue
                    best_len = nt_end - nt_start
                    best = SequenceRecord(
                        name=rec.name,
                        sequence=strand_seq[nt_start:nt_end],
                        comment=f"strand={strand} frame={frame} start={nt_start}",
                    )

    if best is None:
        raise ReferenceORFError("No ORF found in the input sequences")
    logger.info("Longest ORF: %s (%d nt, %s)", best.name, best.length, best.comment)
    return best
