"""
Phylip-style block alignment format.

Modules:
- scanner: Tokenizer (NUMERIC / IDENTIFIER / WHITESPACE / ENDOFLINE / EOF)
- parser: Block parser building an Alignment
- writer: Block writer (60-symbol lines, 10-symbol chunks)
"""

from orfphase.phylip.scanner import Scanner, Token, TokenKind
from orfphase.phylip.parser import Parser, parse_phylip, read_phylip
from orfphase.phylip.writer import write_alignment, write_phylip, PHYLIP_LINE, PHYLIP_BLOCK

__all__ = [
    "Scanner",
    "Token",
    "TokenKind",
    "Parser",
    "parse_phylip",
    "read_phylip",
    "write_alignment",
    "write_phylip",
    "PHYLIP_LINE",
    "PHYLIP_BLOCK",
]
