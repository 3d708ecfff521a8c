import pytest

from orfphase.errors import FormatError
from orfphase.phylip.parser import parse_phylip, read_phylip

INTERLEAVED = (
    "  3   14\n"
    "seq1  ACGTACGTAC\n"
    "seq2  ACGTACGTTT\n"
    "seq3  ACGTACGTGG\n"
    "\n"
    "ACGT\n"
    "TTTT\n"
    "GG-G\n"
)


def test_parse_single_block():
    al = parse_phylip("  2   8\nA  ACGT ACGT\nB  TTTT ACGT\n")
    assert al.names() == ["A", "B"]
    assert al.as_dict() == {"A": "ACGTACGT", "B": "TTTTACGT"}
    assert al.length == 8
    assert al.alphabet == "nucleotide"


def test_parse_interleaved_blocks():
    al = parse_phylip(INTERLEAVED)
    assert al.nb_sequences() == 3
    assert al.sequences[0].sequence == "ACGTACGTACACGT"
    assert al.sequences[2].sequence == "ACGTACGTGGGG-G"


def test_parse_numeric_names():
    al = parse_phylip("2 4\n1  ACGT\n2  ACGA\n")
    assert al.names() == ["1", "2"]


def test_parse_collapses_blank_line_runs():
    text = INTERLEAVED.replace("\n\n", "\n\n\n\n")
    assert parse_phylip(text).sequences[1].sequence == "ACGTACGTTTTTTT"


def test_parse_trailing_blank_lines():
    al = parse_phylip("  1   4\ns  ACGT\n\n\n")
    assert al.sequences[0].sequence == "ACGT"


def test_parse_missing_final_newline():
    al = parse_phylip("  1   4\ns  ACGT")
    assert al.sequences[0].sequence == "ACGT"


def test_parse_protein_alphabet():
    al = parse_phylip("  1   5\np  MKLFE\n")
    assert al.alphabet == "amino"


def test_parse_zero_sequences_is_empty():
    al = parse_phylip("  0   0\n")
    assert al.nb_sequences() == 0
    assert al.length == 0


def test_reject_missing_sequence_line():
    with pytest.raises(FormatError, match="identifier expected"):
        parse_phylip("  3   4\nA  ACGT\nB  ACGT\n")


def test_reject_truncated_input_with_huge_sequence_count():
    with pytest.raises(FormatError, match="identifier expected for sequence 2"):
        parse_phylip("  100000000000   4\nA  ACGT\n")


def test_reject_wrong_total_length():
    with pytest.raises(FormatError, match="4 of 6"):
        parse_phylip("  2   6\nA  ACGT\nB  ACGT\n")


def test_reject_length_mismatch_across_blocks():
    text = "  2   6\nA  ACGT\nB  ACGT\n\nAC\nACG\n"
    with pytest.raises(FormatError, match="has length"):
        parse_phylip(text)


def test_reject_missing_blank_line_between_blocks():
    with pytest.raises(FormatError, match="blank line"):
        parse_phylip("  1   6\nA  ACGT\nAC\n")


def test_reject_data_after_complete_sequences():
    with pytest.raises(FormatError, match="after complete"):
        parse_phylip("  1   4\nA  ACGT\nACGT\n")


def test_reject_missing_count():
    with pytest.raises(FormatError, match="number of sequences"):
        parse_phylip("seq1 ACGT\n")


def test_reject_header_without_newline():
    with pytest.raises(FormatError, match="newline"):
        parse_phylip("  1   4 x\nA  ACGT\n")


def test_reject_numeric_token_in_sequence():
    with pytest.raises(FormatError, match="unexpected"):
        parse_phylip("  1   4\nA  AC 12\n")


def test_read_phylip_from_file(tmp_path):
    path = tmp_path / "aln.phy"
    path.write_text(INTERLEAVED)
    assert read_phylip(path).nb_sequences() == 3
