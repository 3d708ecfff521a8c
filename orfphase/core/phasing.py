"""
Phasing of nucleotide sequences against a reference ORF.

For every input sequence:
1. Drop gap symbols, translate the 3 forward frames (and the 3 reverse-complement
   frames if asked)
2. Align each translation locally against the translated reference ORF
3. Keep frames whose alignment starts at the first residue of the reference
4. Take the frame with the most identities and apply the length / match cutoffs
5. Trim the nucleotides before the aligned start (and after the aligned end with
   cut_end), translate the trimmed sequence

Sequences are processed by a pool of worker threads. Results are streamed back
in completion order through a bounded queue (see PhaseRun).
"""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from Bio.Align import PairwiseAligner, substitution_matrices

from orfphase.core.distance import JCModel
from orfphase.errors import AlphabetError, DistanceError, PhasingError, ReferenceORFError
from orfphase.schemas.phase import PhaseConfig, PhasedSequence, ReferenceORF
from orfphase.schemas.sequences import Alignment, SeqBag, SequenceRecord
from orfphase.utils.alphabet import NUCLEOTIDE, UNKNOWN, detect_alphabet, strip_gaps
from orfphase.utils.translation import reverse_complement, translate

logger = logging.getLogger(__name__)

RESULT_QUEUE_SIZE = 50
_DONE = object()


@dataclass(frozen=True)
class FrameHit:
    """Local alignment of one frame translation against the reference protein."""
    matches: int
    length: int
    ref_start: int
    query_start: int
    query_end: int
    blocks: Tuple[Tuple[int, int, int], ...]  # (ref_start, query_start, size) ungapped blocks


def alignment_stats(alignment, ref: str, query: str) -> FrameHit:
    coords = alignment.coordinates
    matches = 0
    length = 0
    blocks: List[Tuple[int, int, int]] = []
    for k in range(coords.shape[1] - 1):
        r0, r1 = int(coords[0, k]), int(coords[0, k + 1])
        q0, q1 = int(coords[1, k]), int(coords[1, k + 1])
        length += max(r1 - r0, q1 - q0)
        if r1 > r0 and q1 > q0:
            blocks.append((r0, q0, r1 - r0))
            matches += sum(1 for a, b in zip(ref[r0:r1], query[q0:q1]) if a == b)
    return FrameHit(
        matches=matches,
        length=length,
        ref_start=int(coords[0, 0]),
        query_start=int(coords[1, 0]),
        query_end=int(coords[1, -1]),
        blocks=tuple(blocks),
    )


def _ensure_nucleotide(bag: SeqBag, what: str) -> None:
    alphabet = bag.alphabet
    if alphabet == UNKNOWN:
        alphabet = detect_alphabet(rec.sequence for rec in bag.sequences)
    if alphabet != NUCLEOTIDE:
        raise AlphabetError(f"{what} must be nucleotide sequences (detected: {alphabet})")


class Phaser:
    """Phases sequences against one reference ORF. Configuration is fixed per instance."""

    def __init__(self, config: Optional[PhaseConfig] = None):
        self.config = config or PhaseConfig()
        self._matrix = substitution_matrices.load(self.config.substitution_matrix)
        self._matrix_alphabet = frozenset(self._matrix.alphabet)
        self._local = threading.local()

    def _aligner(self) -> PairwiseAligner:
        # PairwiseAligner instances are not shared between threads
        aligner = getattr(self._local, "aligner", None)
        if aligner is None:
            aligner = PairwiseAligner()
            aligner.mode = "local"
            aligner.substitution_matrix = self._matrix
            aligner.open_gap_score = self.config.gap_open
            aligner.extend_gap_score = self.config.gap_extend
            self._local.aligner = aligner
        return aligner

    def _sanitize(self, protein: str) -> str:
        return "".join(aa if aa in self._matrix_alphabet else "X" for aa in protein)

    def reference(self, orfs: SeqBag) -> ReferenceORF:
        """
        Build the reference from the first sequence of the bag.

        Raises:
            ReferenceORFError: empty bag or untranslatable reference.
            AlphabetError: reference is not nucleotide.
        """
        if orfs.nb_sequences() < 1:
            raise ReferenceORFError("Reference ORF file should contain at least one sequence")
        _ensure_nucleotide(orfs, "Reference ORF")
        rec = orfs.sequences[0]
        nt = strip_gaps(rec.sequence.upper())
        aa = translate(nt, 0, self.config.genetic_code)
        if not aa:
            raise ReferenceORFError(f"Reference ORF {rec.name} is shorter than one codon")
        return ReferenceORF(name=rec.name, nt=nt, aa=aa)

    def align_frame(self, ref: ReferenceORF, protein: str) -> Optional[FrameHit]:
        ref_aa = self._sanitize(ref.aa)
        query = self._sanitize(protein)
        alignment = next(iter(self._aligner().align(ref_aa, query)), None)
        if alignment is None or alignment.score <= 0:
            return None
        return alignment_stats(alignment, ref_aa, query)

    def codon_distance(self, ref: ReferenceORF, strand_seq: str, frame: int, hit: FrameHit) -> float:
        """JC69 distance between reference and candidate codons of the ungapped aligned blocks."""
        ref_parts = []
        query_parts = []
        for r0, q0, size in hit.blocks:
            ref_parts.append(ref.nt[3 * r0:3 * (r0 + size)])
            start = frame + 3 * q0
            query_parts.append(strand_seq[start:start + 3 * size])
        codons = Alignment(alphabet=NUCLEOTIDE)
        codons.add_sequence(ref.name, "".join(ref_parts))
        codons.add_sequence("query", "".join(query_parts))
        model = JCModel(remove_gaps=True)
        model.init_model(codons)
        return model.distance(model.sequence(0), model.sequence(1))

    def _safe_distance(self, ref: ReferenceORF, strand_seq: str, frame: int, hit: FrameHit, name: str) -> Optional[float]:
        try:
            return self.codon_distance(ref, strand_seq, frame, hit)
        except DistanceError as exc:
            logger.debug("%s: no distance (%s)", name, exc)
            return None

    def phase_sequence(self, ref: ReferenceORF, rec: SequenceRecord) -> PhasedSequence:
        """Phase one sequence. Failures are returned as a failed PhasedSequence."""
        try:
            return self._phase_sequence(ref, rec)
        except Exception as exc:
            logger.debug("Phasing failed for %s: %s", rec.name, exc)
            return PhasedSequence(
                name=rec.name,
                error=PhasingError(rec.name, str(exc), exc),
            )

    def _phase_sequence(self, ref: ReferenceORF, rec: SequenceRecord) -> PhasedSequence:
        cfg = self.config
        seq = strip_gaps(rec.sequence.upper())
        strands = [("+", seq)]
        if cfg.reverse:
            strands.append(("-", reverse_complement(seq)))

        best = None
        for strand, strand_seq in strands:
            for frame in (0, 1, 2):
                protein = translate(strand_seq, frame, cfg.genetic_code)
                if not protein:
                    continue
                hit = self.align_frame(ref, protein)
                # phase must be anchored at the reference start
                if hit is None or hit.ref_start != 0:
                    continue
                if best is None or hit.matches > best[3].matches:
                    best = (strand, strand_seq, frame, hit)

        if best is None:
            logger.debug("%s: no frame anchored at the reference start", rec.name)
            return PhasedSequence(name=rec.name, removed=True)

        strand, strand_seq, frame, hit = best
        if cfg.len_cutoff_enabled and hit.length / len(ref.aa) < cfg.len_cutoff:
            logger.debug("%s: alignment length %d under length cutoff", rec.name, hit.length)
            return PhasedSequence(name=rec.name, removed=True)
        if cfg.match_cutoff_enabled and hit.matches / hit.length < cfg.match_cutoff:
            logger.debug("%s: %d/%d matches under match cutoff", rec.name, hit.matches, hit.length)
            return PhasedSequence(name=rec.name, removed=True)

        nt_start = frame + 3 * hit.query_start
        nt_end = frame + 3 * hit.query_end if cfg.cut_end else len(strand_seq)
        nt_seq = strand_seq[nt_start:nt_end]
        return PhasedSequence(
            name=rec.name,
            nt_seq=nt_seq,
            aa_seq=translate(nt_seq, 0, cfg.genetic_code),
            position=nt_start,
            strand=strand,
            frame=frame,
            matches=hit.matches,
            alignment_length=hit.length,
            distance=self._safe_distance(ref, strand_seq, frame, hit, rec.name),
        )

    def phase(self, orfs: SeqBag, sequences: SeqBag) -> "PhaseRun":
        """
        Start phasing all sequences against the first ORF of orfs.

        Input and reference problems raise here, before any worker starts.
        Per-sequence problems are reported as failed results of the run.
        """
        _ensure_nucleotide(sequences, "Input sequences")
        ref = self.reference(orfs)
        logger.info(
            "Phasing %d sequences against %s (%d aa) with %d workers",
            sequences.nb_sequences(), ref.name, len(ref.aa), self.config.workers,
        )
        return PhaseRun(self, ref, list(sequences.sequences))


class PhaseRun:
    """
    Running phasing job. Iterate to receive PhasedSequence results in completion order.

    The run must be drained (iterate to the end) or closed. Using it as a context
    manager closes it on exit, which stops scheduling and discards pending results.
    """

    def __init__(self, phaser: Phaser, reference: ReferenceORF, sequences: List[SequenceRecord]):
        self.reference = reference
        self.total = len(sequences)
        self._phaser = phaser
        self._nworkers = phaser.config.workers
        self._fail_fast = phaser.config.fail_fast
        self._work: queue.Queue = queue.Queue(maxsize=2 * self._nworkers)
        self._results: queue.Queue = queue.Queue(maxsize=RESULT_QUEUE_SIZE)
        self._stop = threading.Event()
        self._finished = False

        self._feeder = threading.Thread(target=self._feed, args=(sequences,), daemon=True)
        self._workers = [
            threading.Thread(target=self._work_loop, name=f"phaser-{i}", daemon=True)
            for i in range(self._nworkers)
        ]
        self._closer = threading.Thread(target=self._close_results, daemon=True)
        self._feeder.start()
        for worker in self._workers:
            worker.start()
        self._closer.start()

    def _feed(self, sequences: List[SequenceRecord]) -> None:
        try:
            for rec in sequences:
                if self._stop.is_set():
                    logger.debug("Stopped scheduling sequences")
                    break
                self._work.put(rec)
        finally:
            for _ in range(self._nworkers):
                self._work.put(_DONE)

    def _work_loop(self) -> None:
        while True:
            rec = self._work.get()
            if rec is _DONE:
                break
            if self._stop.is_set():
                continue
            result = self._phaser.phase_sequence(self.reference, rec)
            self._results.put(result)
            if result.failed and self._fail_fast:
                self._stop.set()

    def _close_results(self) -> None:
        self._feeder.join()
        for worker in self._workers:
            worker.join()
        self._results.put(_DONE)

    def __iter__(self) -> Iterator[PhasedSequence]:
        if self._finished:
            return
        done = 0
        while True:
            item = self._results.get()
            if item is _DONE:
                self._finished = True
                return
            done += 1
            if done % 100 == 0 or done == self.total:
                logger.info("Processed %d/%d sequences", done, self.total)
            yield item

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def close(self) -> None:
        """Stop scheduling new sequences and wait for in-flight workers."""
        self._stop.set()
        while not self._finished:
            if self._results.get() is _DONE:
                self._finished = True
        self._closer.join()

    def collect(self) -> List[PhasedSequence]:
        return list(self)

    def __enter__(self) -> "PhaseRun":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
