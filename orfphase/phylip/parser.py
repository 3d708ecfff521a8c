"""
Parser for interleaved phylip-style alignments.

Layout:

      3   25
    seq1  ACGTACGTAC GTACG
    seq2  ACGTACGTAC GTACG
    seq3  ACGTACGTAC GTACG

    TTTTTTTTTT
    TTTTTTTTTT
    TTTTTTTTTT

The header gives the number of sequences and their length. The first block
carries names; continuation blocks are separated by blank lines and carry only
sequence data, one line per sequence in header order.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, TextIO

from orfphase.errors import FormatError
from orfphase.phylip.scanner import Scanner, Token, TokenKind
from orfphase.schemas.sequences import Alignment
from orfphase.utils.alphabet import detect_alphabet

logger = logging.getLogger(__name__)


class Parser:
    def __init__(self, stream: TextIO):
        self._scanner = Scanner(stream)
        self._last: Token = Token(TokenKind.EOF, "")
        self._buffered = False

    def _scan(self) -> Token:
        """Next token, or the unscanned one if a token was pushed back."""
        if self._buffered:
            self._buffered = False
            return self._last
        self._last = self._scanner.scan()
        return self._last

    def _unscan(self) -> None:
        self._buffered = True

    def _scan_with_eol(self) -> Token:
        """Like _scan, but a run of blank lines collapses into a single ENDOFLINE."""
        tok = self._scan()
        if tok.kind != TokenKind.ENDOFLINE:
            return tok
        while tok.kind == TokenKind.ENDOFLINE:
            tok = self._scan()
        self._unscan()
        return Token(TokenKind.ENDOFLINE, "\n")

    def _scan_count(self, what: str) -> int:
        tok = self._scan()
        if tok.kind != TokenKind.NUMERIC:
            raise FormatError(f"Phylip header must give the {what}, got {tok.literal!r}")
        try:
            return int(tok.literal)
        except ValueError:
            raise FormatError(f"The numeric is not parsable: {tok.literal}") from None

    def _read_line(self, buffer: List[str], index: int) -> None:
        """Append IDENTIFIER tokens up to the end of the line to buffer."""
        tok = self._scan()
        while tok.kind != TokenKind.ENDOFLINE:
            if tok.kind == TokenKind.IDENTIFIER:
                buffer.append(tok.literal)
            elif tok.kind == TokenKind.EOF:
                # last line without trailing newline
                self._unscan()
                return
            elif tok.kind != TokenKind.WHITESPACE:
                raise FormatError(
                    f"Bad phylip format, unexpected {tok.literal!r} in sequence {index + 1}"
                )
            tok = self._scan()

    def _end_of_block(self, first_length: int, seq_len: int) -> Token:
        """
        Check what follows a block. Returns the next token (pushed back) or EOF.
        """
        tok = self._scan_with_eol()
        if tok.kind == TokenKind.ENDOFLINE:
            tok = self._scan()
            self._unscan()
            return tok
        if first_length != seq_len:
            raise FormatError(
                f"Bad phylip format, blank line expected: sequences have {first_length} "
                f"of {seq_len} symbols"
            )
        if tok.kind != TokenKind.EOF:
            raise FormatError(
                f"Bad phylip format, unexpected {tok.literal!r} after complete sequences"
            )
        return tok

    def parse(self) -> Alignment:
        tok = self._scan()
        if tok.kind != TokenKind.WHITESPACE:
            self._unscan()
        nb_seq = self._scan_count("number of sequences")

        tok = self._scan()
        if tok.kind != TokenKind.WHITESPACE:
            raise FormatError("There should be a whitespace between number of sequences and length")
        seq_len = self._scan_count("sequence length")

        tok = self._scan()
        if tok.kind != TokenKind.ENDOFLINE:
            raise FormatError("Bad phylip format, newline missing after header")

        if nb_seq == 0:
            logger.warning("Phylip header declares no sequence")
            return Alignment()

        names: List[str] = []
        seqs: List[List[str]] = []

        for i in range(nb_seq):
            tok = self._scan()
            if tok.kind not in (TokenKind.IDENTIFIER, TokenKind.NUMERIC):
                raise FormatError(
                    f"Bad phylip format, sequence identifier expected for sequence {i + 1}, "
                    f"got {tok.literal!r}"
                )
            # buffers grow with the data read, never with the header count
            names.append(tok.literal)
            seqs.append([])
            self._read_line(seqs[i], i)

        tok = self._end_of_block(_buffer_length(seqs[0]), seq_len)

        blocks = 1
        while tok.kind != TokenKind.EOF:
            for i in range(nb_seq):
                tok = self._scan()
                if tok.kind != TokenKind.IDENTIFIER:
                    raise FormatError(
                        f"Bad phylip format, sequence block {blocks + 1} is missing line {i + 1}"
                    )
                seqs[i].append(tok.literal)
                self._read_line(seqs[i], i)
            blocks += 1
            tok = self._end_of_block(_buffer_length(seqs[0]), seq_len)

        alignment = None
        for name, chunks in zip(names, seqs):
            seq = "".join(chunks)
            if len(seq) != seq_len:
                raise FormatError(
                    f"Bad phylip format, sequence {name} has length {len(seq)} "
                    f"but header says {seq_len}"
                )
            if alignment is None:
                alignment = Alignment(alphabet=detect_alphabet(seq))
            alignment.add_sequence(name, seq)

        logger.debug("Parsed %d sequences of length %d in %d blocks", nb_seq, seq_len, blocks)
        return alignment


def _buffer_length(chunks: List[str]) -> int:
    return sum(len(c) for c in chunks)


def parse_phylip(text: str) -> Alignment:
    return Parser(io.StringIO(text)).parse()


def read_phylip(path: Path) -> Alignment:
    with Path(path).open() as handle:
        return Parser(handle).parse()
