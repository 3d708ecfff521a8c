from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import List

from orfphase.config import load_phase_config
from orfphase.core.orf import longest_orf
from orfphase.core.phasing import Phaser
from orfphase.core.report import results_to_frame, write_report
from orfphase.errors import AlphabetError, OrfPhaseError, ReferenceORFError
from orfphase.schemas.phase import PhasedSequence, ReferenceORF
from orfphase.schemas.sequences import SeqBag
from orfphase.utils.sequence_io import read_alignment, read_fasta_bag, write_fasta_bag

logger = logging.getLogger(__name__)

LOG_HEADER = ["SeqName", "StartPosition", "ExtractedSequenceLength", "FirstStop"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orfphase", description="Reading-frame phasing against a reference ORF.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    phase = sub.add_parser(
        "phase",
        help="Find best ATGs and set them as new start positions",
        description=(
            "Translate each sequence in 3 frames (6 with --reverse), align against the "
            "translated reference ORF, keep the best phase anchored at the ORF start and "
            "remove the nucleotides before it."
        ),
    )
    phase.add_argument("-i", "--input", type=Path, required=True)
    phase.add_argument("--input-format", choices=["fasta", "phylip"], default="fasta")
    phase.add_argument(
        "--unaligned",
        action="store_true",
        help="Consider sequences as unaligned; only FASTA is accepted (--input-format is ignored)",
    )
    phase.add_argument(
        "--ref-orf",
        default="none",
        help="Reference ORF FASTA file (first sequence used); 'none' detects the longest ORF",
    )
    phase.add_argument("-o", "--output", default="-", help="Phased nucleotide FASTA ('-' for stdout)")
    phase.add_argument("--aa-output", default="none", help="Phased amino-acid FASTA")
    phase.add_argument("-l", "--log", default="none", help="TSV log of start positions")
    phase.add_argument("--report", type=Path, default=None, help="Detailed TSV report")
    phase.add_argument(
        "--len-cutoff",
        type=float,
        default=None,
        help="Length cutoff, over ORF length, to consider sequence hits (-1: no cutoff)",
    )
    phase.add_argument(
        "--match-cutoff",
        type=float,
        default=None,
        help="Matches cutoff, over alignment length, to consider sequence hits (-1: no cutoff)",
    )
    phase.add_argument("--reverse", action="store_true", default=None, help="Also search the reverse strand")
    phase.add_argument(
        "--cut-end",
        action="store_true",
        default=None,
        help="Also remove the end of sequences that do not align with the ORF",
    )
    phase.add_argument("-t", "--threads", type=int, default=None, help="Worker threads (default: CPU count)")
    phase.add_argument(
        "--no-fail-fast",
        dest="fail_fast",
        action="store_false",
        default=None,
        help="Report sequences that fail and continue instead of aborting",
    )
    phase.add_argument("--config", type=Path, default=None, help="JSON file with phasing options")
    phase.set_defaults(func=run_phase)
    return parser


def read_inputs(args: argparse.Namespace) -> SeqBag:
    if args.unaligned:
        inseqs = read_fasta_bag(args.input)
    else:
        inseqs = read_alignment(args.input, args.input_format).unalign()
    if not inseqs.is_nucleotide():
        raise AlphabetError(f"Input sequences are not nucleotide ({inseqs.alphabet})")
    logger.info("Read %d sequences from %s", inseqs.nb_sequences(), args.input)
    return inseqs


def read_reference(args: argparse.Namespace, inseqs: SeqBag, reverse: bool) -> SeqBag:
    if args.ref_orf != "none":
        reforf = read_fasta_bag(Path(args.ref_orf))
        if reforf.nb_sequences() < 1:
            raise ReferenceORFError("Reference ORF file should contain at least one sequence")
        return reforf
    orf = longest_orf(inseqs, reverse)
    reforf = SeqBag()
    reforf.add_sequence(f"{orf.name}_LongestORF", orf.sequence, orf.comment)
    reforf.auto_alphabet()
    return reforf


def write_log(path: str, reference: ReferenceORF, rows: List[List[str]]) -> None:
    with Path(path).open("w", newline="") as handle:
        handle.write(f"Detected/Given ORF: {reference.name}\t{reference.nt}\n")
        writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
        writer.writerow(LOG_HEADER)
        writer.writerows(rows)


def run_phase(args: argparse.Namespace) -> int:
    config = load_phase_config(
        args.config,
        {
            "len_cutoff": args.len_cutoff,
            "match_cutoff": args.match_cutoff,
            "reverse": args.reverse,
            "cut_end": args.cut_end,
            "workers": args.threads,
            "fail_fast": args.fail_fast,
        },
    )
    inseqs = read_inputs(args)
    reforf = read_reference(args, inseqs, config.reverse)

    phased = SeqBag(alphabet="nucleotide")
    phased_aa = SeqBag(alphabet="amino")
    log_rows: List[List[str]] = []
    results: List[PhasedSequence] = []

    with Phaser(config).phase(reforf, inseqs) as run:
        for res in run:
            results.append(res)
            if res.failed:
                if config.fail_fast:
                    logger.error("Phasing aborted: %s", res.error)
                    return 2
                logger.warning("Phasing failed: %s", res.error)
                log_rows.append([res.name, "Failed", str(res.error)])
            elif res.removed:
                log_rows.append([res.name, "Removed", "N/A"])
            else:
                phased.add_sequence(res.name, res.nt_seq)
                phased_aa.add_sequence(res.name, res.aa_seq)
                log_rows.append([res.name, str(res.position), str(len(res.aa_seq)), str(res.first_stop)])
        reference = run.reference

    logger.info(
        "Accepted %d, removed %d, failed %d",
        phased.nb_sequences(),
        sum(1 for r in results if r.removed),
        sum(1 for r in results if r.failed),
    )

    # outputs are written only once the whole run succeeded
    write_fasta_bag(phased, args.output)
    if args.aa_output != "none":
        write_fasta_bag(phased_aa, args.aa_output)
    if args.log != "none":
        write_log(args.log, reference, log_rows)
    if args.report is not None:
        write_report(results_to_frame(results), args.report)
        logger.info("Wrote report to %s", args.report)
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        return args.func(args)
    except (OrfPhaseError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2
