import os
from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Strand = Literal["+", "-"]


def _default_workers() -> int:
    return os.cpu_count() or 1


class PhaseConfig(BaseModel):
    """Cutoffs and runtime options for one phasing run."""
    len_cutoff: float = Field(
        default=-1.0,
        description="Minimum alignment length over reference protein length (<0 disables)",
    )
    match_cutoff: float = Field(
        default=0.5,
        description="Minimum matches over alignment length (<0 disables)",
    )
    reverse: bool = Field(
        default=False,
        description="Also search the reverse-complement strand",
    )
    cut_end: bool = Field(
        default=False,
        description="Also trim trailing nucleotides that do not align with the reference",
    )
    workers: int = Field(default_factory=_default_workers, ge=1)
    fail_fast: bool = Field(
        default=True,
        description="Stop scheduling sequences after the first per-sequence failure",
    )
    genetic_code: int = Field(default=1, ge=1)
    substitution_matrix: str = "BLOSUM62"
    gap_open: float = Field(default=-10.0, le=0.0)
    gap_extend: float = Field(default=-0.5, le=0.0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("len_cutoff", "match_cutoff")
    @classmethod
    def _validate_cutoff(cls, value: float) -> float:
        if value > 1.0:
            raise ValueError(f"Cutoffs are proportions and cannot exceed 1.0: {value}")
        return value

    @property
    def len_cutoff_enabled(self) -> bool:
        return self.len_cutoff >= 0

    @property
    def match_cutoff_enabled(self) -> bool:
        return self.match_cutoff >= 0


@dataclass(frozen=True)
class ReferenceORF:
    name: str
    nt: str
    aa: str  # translation from position 0 of nt


@dataclass(frozen=True)
class PhasedSequence:
    """Verdict for one input sequence: accepted, removed or failed."""
    name: str
    removed: bool = False
    nt_seq: str = ""
    aa_seq: str = ""
    position: int = -1  # trim offset into the (strand-oriented) input sequence
    strand: Strand = "+"
    frame: int = -1
    matches: int = 0
    alignment_length: int = 0
    distance: Optional[float] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def accepted(self) -> bool:
        return not self.removed and self.error is None

    @property
    def first_stop(self) -> int:
        return self.aa_seq.find("*")
