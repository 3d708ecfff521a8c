"""
Error taxonomy shared by the parser, the encoders and the phasing engine.

Cutoff rejections are not errors: a sequence that fails the cutoffs is reported
as a removed PhasedSequence.
"""
from __future__ import annotations

from typing import Optional


class OrfPhaseError(Exception):
    """Base class for all orfphase errors."""


class FormatError(OrfPhaseError):
    """Raised when block-formatted (phylip) input is malformed."""


class AlphabetError(OrfPhaseError):
    """Raised when a sequence does not belong to the expected alphabet."""


class ReferenceORFError(OrfPhaseError):
    """Raised when the reference ORF is missing, empty or cannot be detected."""


class DistanceError(OrfPhaseError, ValueError):
    """Raised when a distance is undefined (no comparable site)."""


class PhasingError(OrfPhaseError):
    """Failure while phasing a single sequence. The original exception is the cause."""

    def __init__(self, name: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{name}: {message}")
        self.name = name
        if cause is not None:
            self.__cause__ = cause
