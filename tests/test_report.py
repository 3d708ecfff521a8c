import pandas as pd

from orfphase.core.report import REPORT_COLUMNS, results_to_frame, write_report
from orfphase.errors import PhasingError
from orfphase.schemas.phase import PhasedSequence


def sample_results():
    return [
        PhasedSequence(
            name="b",
            nt_seq="ATGCCCGGGTAA",
            aa_seq="MPG*",
            position=2,
            frame=2,
            matches=4,
            alignment_length=4,
            distance=0.0,
        ),
        PhasedSequence(name="a", removed=True),
        PhasedSequence(name="c", error=PhasingError("c", "boom")),
    ]


def test_results_to_frame_statuses():
    frame = results_to_frame(sample_results())
    assert list(frame.columns) == REPORT_COLUMNS
    statuses = dict(zip(frame["name"], frame["status"]))
    assert statuses == {"a": "removed", "b": "accepted", "c": "failed"}
    row = frame[frame["name"] == "b"].iloc[0]
    assert row["start"] == 2
    assert row["first_stop"] == 3
    assert row["identity"] == 1.0
    assert "boom" in frame[frame["name"] == "c"].iloc[0]["error"]


def test_write_report_sorted(tmp_path):
    path = tmp_path / "out" / "report.tsv"
    write_report(results_to_frame(sample_results()), path)
    df = pd.read_csv(path, sep="\t")
    assert list(df["name"]) == ["a", "b", "c"]
