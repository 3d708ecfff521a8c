import numpy as np
import pytest

from orfphase.core.encoding import GAP_CODE, alignment_to_codes, encode
from orfphase.errors import AlphabetError
from orfphase.schemas.sequences import Alignment


def test_encode_nucleotides():
    np.testing.assert_array_equal(encode("ACGT", "nucleotide"), [0, 1, 2, 3])


def test_encode_is_case_insensitive_and_maps_u_to_t():
    np.testing.assert_array_equal(encode("acgu", "nucleotide"), encode("ACGT", "nucleotide"))


def test_gaps_and_ambiguity_share_sentinel():
    codes = encode("A-N.R?", "nucleotide")
    assert codes[0] == 0
    assert all(c == GAP_CODE for c in codes[1:])


def test_encode_amino_acids():
    codes = encode("ARV", "amino")
    np.testing.assert_array_equal(codes, [0, 1, 19])
    assert encode("X*-", "amino").tolist() == [GAP_CODE] * 3


def test_same_symbol_same_code():
    codes = encode("GAGAG", "nucleotide")
    assert len(set(codes[::2].tolist())) == 1


def test_reject_symbol_outside_alphabet():
    with pytest.raises(AlphabetError, match="position 2"):
        encode("ACZT", "nucleotide")


def test_reject_unknown_alphabet():
    with pytest.raises(AlphabetError):
        encode("ACGT", "unknown")


def test_alignment_to_codes():
    al = Alignment(alphabet="nucleotide")
    al.add_sequence("a", "AC")
    al.add_sequence("b", "GT")
    codes = alignment_to_codes(al)
    assert [c.tolist() for c in codes] == [[0, 1], [2, 3]]
