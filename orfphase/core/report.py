"""Tabular summary of phasing results."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from orfphase.schemas.phase import PhasedSequence

REPORT_COLUMNS = [
    "name",
    "status",
    "strand",
    "frame",
    "start",
    "nt_length",
    "aa_length",
    "first_stop",
    "matches",
    "alignment_length",
    "identity",
    "jc69_distance",
    "error",
]


def status_of(result: PhasedSequence) -> str:
    if result.failed:
        return "failed"
    if result.removed:
        return "removed"
    return "accepted"


def results_to_frame(results: Iterable[PhasedSequence]) -> pd.DataFrame:
    rows = []
    for res in results:
        accepted = res.accepted
        rows.append({
            "name": res.name,
            "status": status_of(res),
            "strand": res.strand if accepted else None,
            "frame": res.frame if accepted else None,
            "start": res.position if accepted else None,
            "nt_length": len(res.nt_seq) if accepted else None,
            "aa_length": len(res.aa_seq) if accepted else None,
            "first_stop": res.first_stop if accepted else None,
            "matches": res.matches if accepted else None,
            "alignment_length": res.alignment_length if accepted else None,
            "identity": res.matches / res.alignment_length if accepted and res.alignment_length else None,
            "jc69_distance": res.distance,
            "error": str(res.error) if res.failed else None,
        })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def write_report(frame: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.sort_values(by=["name"], kind="stable").to_csv(path, sep="\t", index=False)
