"""
Main entry point for orfphase.

Usage:
    python -m orfphase phase -i input.fasta --unaligned -o phased.fasta
"""

import sys

from orfphase.cli import main


if __name__ == "__main__":
    sys.exit(main() or 0)
