"""
Sequence I/O helpers backed by Biopython (FASTA) and the phylip parser.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from orfphase.errors import FormatError
from orfphase.phylip.parser import read_phylip
from orfphase.schemas.sequences import Alignment, SeqBag

InputFormat = Literal["fasta", "phylip"]


def read_fasta_bag(path: Path) -> SeqBag:
    """Read a FASTA file into a SeqBag with auto-detected alphabet."""
    bag = SeqBag()
    for record in SeqIO.parse(str(path), "fasta"):
        comment = record.description[len(record.id):].strip()
        bag.add_sequence(record.id, str(record.seq).upper(), comment)
    bag.auto_alphabet()
    return bag


def read_fasta_alignment(path: Path) -> Alignment:
    bag = read_fasta_bag(path)
    try:
        return Alignment(alphabet=bag.alphabet, sequences=bag.sequences)
    except ValueError as exc:
        raise FormatError(f"{path} is not an alignment: {exc}") from exc


def read_alignment(path: Path, fmt: InputFormat = "fasta") -> Alignment:
    if fmt == "phylip":
        return read_phylip(path)
    return read_fasta_alignment(path)


def write_fasta_bag(bag: SeqBag, path: Path | str) -> None:
    """Write a SeqBag to a FASTA file ('-' writes to stdout)."""
    records = [
        SeqRecord(Seq(rec.sequence), id=rec.name, description=rec.comment)
        for rec in bag.sequences
    ]
    if str(path) == "-":
        SeqIO.write(records, sys.stdout, "fasta")
        return
    with Path(path).open("w") as handle:
        SeqIO.write(records, handle, "fasta")
