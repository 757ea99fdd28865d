"""Input validation utilities."""

import sys
import argparse
from pathlib import Path

from .indexing import infer_format_letter

__all__ = ["validate_cli_arguments"]


def validate_cli_arguments(args: argparse.Namespace) -> None:
    """Validate CLI argument combinations and constraints.

    Resolves ``args.output_format`` when it is "auto".

    Args:
        args: Parsed command line arguments
    """
    to_stdout = str(args.output) == "-"

    if args.output_format == "auto":
        args.output_format = "v" if to_stdout else infer_format_letter(args.output)

    if str(args.input) != "-" and not Path(args.input).exists():
        sys.exit(f"Input VCF not found: {args.input}")

    if not to_stdout and str(args.input) != "-":
        if Path(args.input).resolve() == Path(args.output).resolve():
            sys.exit("-o (output) must differ from the input file")

    if args.write_index:
        if to_stdout:
            sys.exit("--write-index requires -o (output) to be a file")
        if args.output_format not in ("z", "b"):
            sys.exit("--write-index requires -O z (VCF.gz) or -O b (BCF)")
