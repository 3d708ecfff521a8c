"""
Tokenizer for phylip-style block alignments.

The scanner reads a text stream one character at a time and groups characters
into tokens. It never fails: characters it does not recognise are returned as
one-character IDENTIFIER tokens and the parser rejects them in context.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TextIO

_EOF = ""


class TokenKind(Enum):
    NUMERIC = "numeric"
    IDENTIFIER = "identifier"
    WHITESPACE = "whitespace"
    ENDOFLINE = "endofline"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str


def is_whitespace(ch: str) -> bool:
    return ch == " " or ch == "\t"


def is_newline(ch: str) -> bool:
    return ch == "\n" or ch == "\r"


def is_ident(ch: str) -> bool:
    return ch != _EOF and ch.isprintable() and not ch.isspace()


class Scanner:
    def __init__(self, stream: TextIO):
        self._stream = stream
        self._pending = None  # one character of read-ahead

    def _read(self) -> str:
        if self._pending is not None:
            ch, self._pending = self._pending, None
            return ch
        return self._stream.read(1)

    def _unread(self, ch: str) -> None:
        self._pending = ch

    def scan(self) -> Token:
        """Return the next token; EOF is returned again on every later call."""
        ch = self._read()
        if ch == _EOF:
            return Token(TokenKind.EOF, "")
        if is_whitespace(ch):
            self._unread(ch)
            return self._scan_whitespace()
        if is_newline(ch):
            if ch == "\r":
                nxt = self._read()
                if nxt == "\n":
                    return Token(TokenKind.ENDOFLINE, "\r\n")
                self._unread(nxt)
            return Token(TokenKind.ENDOFLINE, ch)
        if is_ident(ch):
            self._unread(ch)
            return self._scan_ident()
        return Token(TokenKind.IDENTIFIER, ch)

    def _scan_whitespace(self) -> Token:
        buf = []
        ch = self._read()
        while is_whitespace(ch):
            buf.append(ch)
            ch = self._read()
        self._unread(ch)
        return Token(TokenKind.WHITESPACE, "".join(buf))

    def _scan_ident(self) -> Token:
        buf = []
        ch = self._read()
        while is_ident(ch):
            buf.append(ch)
            ch = self._read()
        self._unread(ch)
        literal = "".join(buf)
        if literal.isdigit():
            return Token(TokenKind.NUMERIC, literal)
        return Token(TokenKind.IDENTIFIER, literal)
