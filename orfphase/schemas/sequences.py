"""Sequence containers: named records, unaligned bags and aligned blocks."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from orfphase.errors import FormatError
from orfphase.utils.alphabet import NUCLEOTIDE, Alphabet, detect_alphabet, strip_gaps


class SequenceRecord(BaseModel):
    """A named sequence with an optional free-text comment."""
    name: str
    sequence: str
    comment: str = ""

    @property
    def length(self) -> int:
        return len(self.sequence)


class SeqBag(BaseModel):
    """Ordered collection of sequences of any length (unaligned data)."""
    alphabet: Alphabet = "unknown"
    sequences: List[SequenceRecord] = Field(default_factory=list)

    def add_sequence(self, name: str, sequence: str, comment: str = "") -> SequenceRecord:
        record = SequenceRecord(name=name, sequence=sequence, comment=comment)
        self.sequences.append(record)
        return record

    def nb_sequences(self) -> int:
        return len(self.sequences)

    def names(self) -> List[str]:
        return [rec.name for rec in self.sequences]

    def get(self, name: str) -> Optional[SequenceRecord]:
        """First record with this name (names need not be unique)."""
        for rec in self.sequences:
            if rec.name == name:
                return rec
        return None

    def as_dict(self) -> Dict[str, str]:
        return {rec.name: rec.sequence for rec in self.sequences}

    def auto_alphabet(self) -> Alphabet:
        """Detect the alphabet from all sequences and store it."""
        self.alphabet = detect_alphabet(rec.sequence for rec in self.sequences)
        return self.alphabet

    def is_nucleotide(self) -> bool:
        return self.alphabet == NUCLEOTIDE


class Alignment(SeqBag):
    """
    Aligned sequences. Every row has the same length; row identity is positional.
    """

    @model_validator(mode="after")
    def _validate_lengths(self):
        lengths = {rec.length for rec in self.sequences}
        if len(lengths) > 1:
            raise ValueError(f"Aligned sequences must have identical lengths, got {sorted(lengths)}")
        return self

    @property
    def length(self) -> int:
        if not self.sequences:
            return 0
        return self.sequences[0].length

    def add_sequence(self, name: str, sequence: str, comment: str = "") -> SequenceRecord:
        if self.sequences and len(sequence) != self.length:
            raise FormatError(
                f"Sequence {name} has length {len(sequence)}, alignment length is {self.length}"
            )
        return super().add_sequence(name, sequence, comment)

    def unalign(self) -> SeqBag:
        """Return a SeqBag with all gap symbols removed."""
        bag = SeqBag(alphabet=self.alphabet)
        for rec in self.sequences:
            bag.add_sequence(rec.name, strip_gaps(rec.sequence), rec.comment)
        return bag
