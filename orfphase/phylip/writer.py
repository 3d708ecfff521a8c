"""Serialize alignments to the interleaved phylip layout read by the parser."""
from __future__ import annotations

from pathlib import Path
from typing import List

from orfphase.schemas.sequences import Alignment

PHYLIP_LINE = 60
PHYLIP_BLOCK = 10


def format_line(seq: str, start: int) -> str:
    """Symbols [start, start + PHYLIP_LINE) split in space-separated chunks."""
    end = min(start + PHYLIP_LINE, len(seq))
    return " ".join(seq[i:min(i + PHYLIP_BLOCK, end)] for i in range(start, end, PHYLIP_BLOCK))


def write_alignment(alignment: Alignment) -> str:
    lines: List[str] = [f"  {alignment.nb_sequences()}   {alignment.length}"]
    cursize = 0
    while cursize < alignment.length:
        if cursize > 0:
            lines.append("")
        for rec in alignment.sequences:
            line = format_line(rec.sequence, cursize)
            if cursize == 0:
                line = f"{rec.name}  {line}"
            lines.append(line)
        cursize += PHYLIP_LINE
    return "\n".join(lines) + "\n"


def write_phylip(alignment: Alignment, path: Path) -> None:
    Path(path).write_text(write_alignment(alignment))
