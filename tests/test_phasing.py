import pytest

from orfphase.core.phasing import Phaser
from orfphase.errors import AlphabetError, PhasingError, ReferenceORFError
from orfphase.schemas.phase import PhaseConfig
from orfphase.schemas.sequences import SeqBag

REF_ORF = "ATGCCCGGGTAA"


def make_bag(seqs, alphabet="nucleotide"):
    bag = SeqBag(alphabet=alphabet)
    for name, seq in seqs.items():
        bag.add_sequence(name, seq)
    return bag


def reference(seq=REF_ORF):
    return make_bag({"ref": seq})


def run_all(config, seqs, ref=None):
    phaser = Phaser(config)
    with phaser.phase(ref or reference(), make_bag(seqs)) as run:
        return {res.name: res for res in run}


def test_accepts_sequence_with_leading_junk():
    results = run_all(
        PhaseConfig(match_cutoff=0.5, len_cutoff=-1, workers=2),
        {"cand": "TTATGCCCGGGTAAGG"},
    )
    res = results["cand"]
    assert res.accepted
    assert res.position == 2
    assert res.nt_seq == "ATGCCCGGGTAAGG"
    assert res.aa_seq.startswith("MPG")
    assert res.first_stop == 3
    assert res.strand == "+"
    assert res.frame == 2
    assert res.matches == 4
    assert res.distance == 0.0


def test_gaps_are_dropped_before_translation():
    res = run_all(PhaseConfig(workers=1), {"cand": "TTATG-CCCGGGTAAGG"})["cand"]
    assert not res.failed
    assert res.accepted
    assert res.position == 2
    assert res.nt_seq == REF_ORF + "GG"


def test_removes_sequence_without_anchored_frame():
    results = run_all(PhaseConfig(workers=1), {"poly": "CCCCCCCCCCCCCCCCCC"})
    assert results["poly"].removed
    assert not results["poly"].failed


def test_cut_end_trims_unaligned_tail():
    seqs = {"cand": "TTATGCCCGGGTAAGGCAT"}
    kept = run_all(PhaseConfig(workers=1), seqs)["cand"]
    assert kept.nt_seq == "ATGCCCGGGTAAGGCAT"
    assert kept.aa_seq == "MPG*G"
    cut = run_all(PhaseConfig(workers=1, cut_end=True), seqs)["cand"]
    assert cut.nt_seq == "ATGCCCGGGTAA"
    assert cut.position == 2


def test_length_cutoff():
    ref = reference("ATGCCCGGGAAATTTCCCGGGTAA")
    seqs = {"partial": "ATGCCCGGG"}
    assert run_all(PhaseConfig(workers=1, len_cutoff=0.8), seqs, ref)["partial"].removed
    assert run_all(PhaseConfig(workers=1, len_cutoff=-1), seqs, ref)["partial"].accepted


def test_reverse_strand():
    seqs = {"rc": "CCTTACCCGGGCATAA"}  # reverse complement of TTATGCCCGGGTAAGG
    forward_only = run_all(PhaseConfig(workers=1, match_cutoff=0.9), seqs)["rc"]
    assert forward_only.removed
    both = run_all(PhaseConfig(workers=1, match_cutoff=0.9, reverse=True), seqs)["rc"]
    assert both.accepted
    assert both.strand == "-"
    assert both.position == 2
    assert both.aa_seq.startswith("MPG*")


def test_worker_count_does_not_change_outcomes():
    seqs = {}
    for i in range(24):
        junk = "T" * (i % 3) + "C" * (i % 5)
        seqs[f"ok{i}"] = junk + REF_ORF + "GA" * (i % 4)
        seqs[f"bad{i}"] = "C" * (12 + i)
    one = run_all(PhaseConfig(workers=1), seqs)
    eight = run_all(PhaseConfig(workers=8), seqs)
    assert one.keys() == eight.keys() == seqs.keys()
    for name in seqs:
        assert (one[name].removed, one[name].position, one[name].nt_seq) == (
            eight[name].removed,
            eight[name].position,
            eight[name].nt_seq,
        )
    assert sum(1 for r in one.values() if r.accepted) == 24


def test_input_must_be_nucleotide():
    phaser = Phaser(PhaseConfig(workers=1))
    with pytest.raises(AlphabetError):
        phaser.phase(reference(), make_bag({"p": "MKLVEQ"}, alphabet="amino"))


def test_alphabet_detected_when_unknown():
    phaser = Phaser(PhaseConfig(workers=1))
    with pytest.raises(AlphabetError):
        phaser.phase(reference(), make_bag({"p": "MKLVEQ"}, alphabet="unknown"))


def test_reference_must_exist_and_translate():
    phaser = Phaser(PhaseConfig(workers=1))
    seqs = make_bag({"a": REF_ORF})
    with pytest.raises(ReferenceORFError, match="at least one"):
        phaser.phase(SeqBag(alphabet="nucleotide"), seqs)
    with pytest.raises(ReferenceORFError, match="shorter than one codon"):
        phaser.phase(reference("AT"), seqs)


class TestFailures:
    @staticmethod
    def _boom(ref, protein):
        raise RuntimeError("aligner exploded")

    def test_failure_is_carried_by_result(self, monkeypatch):
        phaser = Phaser(PhaseConfig(workers=2, fail_fast=False))
        monkeypatch.setattr(phaser, "align_frame", self._boom)
        seqs = make_bag({f"s{i}": REF_ORF for i in range(6)})
        with phaser.phase(reference(), seqs) as run:
            results = run.collect()
        assert len(results) == 6
        for res in results:
            assert res.failed
            assert not res.accepted
            assert isinstance(res.error, PhasingError)
            assert isinstance(res.error.__cause__, RuntimeError)
            assert res.error.name == res.name

    def test_fail_fast_stops_scheduling(self, monkeypatch):
        phaser = Phaser(PhaseConfig(workers=1, fail_fast=True))
        monkeypatch.setattr(phaser, "align_frame", self._boom)
        seqs = make_bag({f"s{i}": REF_ORF for i in range(20)})
        with phaser.phase(reference(), seqs) as run:
            results = run.collect()
            assert run.stopped
        assert len(results) == 1
        assert results[0].failed


def test_close_before_draining_does_not_hang():
    phaser = Phaser(PhaseConfig(workers=2))
    seqs = make_bag({f"s{i}": "TT" + REF_ORF for i in range(200)})
    run = phaser.phase(reference(), seqs)
    first = next(iter(run))
    assert first.accepted
    run.close()
    assert run.stopped
    assert list(run) == []
