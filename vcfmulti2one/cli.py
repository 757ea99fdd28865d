"""Command-line interface for vcfmulti2one."""

import argparse
import signal
import sys
from pathlib import Path
import subprocess
import platform

from .app import Multi2OneApp, Multi2OneConfig
from .core import ArityMismatchPolicy, DecompositionError
from .utils.validation import validate_cli_arguments
from .version import __version__

__all__ = ["parser_resolve_path", "create_parser", "main", "is_shutdown_requested"]

_shutdown_requested = False


def _signal_handler(signum: int, frame: object) -> None:
    """Handle signals for graceful shutdown."""
    global _shutdown_requested
    if signum == signal.SIGINT:
        print("\nReceived interrupt signal (Ctrl+C). Shutting down gracefully...", file=sys.stderr)
    elif signum == signal.SIGTERM:
        print("\nReceived termination signal. Shutting down gracefully...", file=sys.stderr)
    else:
        print(f"\nReceived signal {signum}. Shutting down gracefully...", file=sys.stderr)
    _shutdown_requested = True


def is_shutdown_requested() -> bool:
    """Check if graceful shutdown was requested."""
    return _shutdown_requested


def _get_git_commit() -> str:
    """Return short git commit hash if available, else 'unknown'."""
    try:
        res = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
        return res.stdout.strip() or "unknown"
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


def _build_version_string() -> str:
    """Compose version string with build and runtime info."""
    commit = _get_git_commit()
    py = platform.python_version()
    return f"vcfmulti2one {__version__} (commit hash {commit})\nPython {py}"


def parser_resolve_path(path: str) -> Path:
    """Resolve CLI-provided path string to an absolute Path; '-' is kept as is.

    Example:
        >>> parser_resolve_path("-")
        '-'
        >>> parser_resolve_path("multi.vcf")
        PosixPath('/absolute/path/to/multi.vcf')
    """
    if path == "-":
        return path
    return Path(path).resolve()


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser.

    Returns:
        Configured ArgumentParser with all vcfmulti2one options

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["in.vcf", "-o", "out.vcf", "-p"])
        >>> print(f"Output: {args.output}, samples: {args.samples}")
        Output: /absolute/path/to/out.vcf, samples: True
    """
    parser = argparse.ArgumentParser(
        prog="vcfmulti2one",
        description=(
            "Convert 'one variant with N ALT alleles' into 'N variants with one "
            "ALT'. INFO fields declared Number=A or Number=R are re-sliced for "
            "each ALT."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog=(
            "Notes: with --samples, genotype alleles that are neither REF nor the "
            "ALT kept by a split are replaced by REF. Symbolic alleles in called "
            "genotypes are rejected."
        ),
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=_build_version_string(),
        help="Show program version, commit hash, and Python version, then exit",
    )

    parser.add_argument(
        "input",
        help="Input VCF/VCF.gz/BCF file ('-' for stdin)",
        type=parser_resolve_path,
        metavar="INPUT",
    )

    grp_split = parser.add_argument_group(
        "Decomposition", "Parameters controlling how variants are split"
    )
    grp_split.add_argument(
        "-p",
        "--samples",
        help=(
            "Keep sample genotypes. Genotype alleles not kept by a split are "
            "set to REF. Without this flag a sites-only VCF is written"
        ),
        action="store_true",
        default=False,
    )
    grp_split.add_argument(
        "-r",
        "--rm-att",
        dest="rm_att",
        help=(
            "Remove INFO attributes whose number of values does not match their "
            "Number=A/R declaration instead of failing"
        ),
        action="store_true",
        default=False,
    )
    grp_split.add_argument(
        "--skip-errors",
        help="Log and skip variants that cannot be decomposed instead of stopping",
        action="store_true",
        default=False,
    )

    grp_output = parser.add_argument_group("Output", "Output files and formats")
    grp_output.add_argument(
        "-o",
        "--output",
        help="Output file ('-' for stdout)",
        type=parser_resolve_path,
        default="-",
        metavar="OUTPUT",
    )
    grp_output.add_argument(
        "-O",
        "--output-format",
        help=(
            "Output format (bcftools-style): auto (from the output name), "
            "v (VCF), z (VCF.gz), u (uncompressed BCF), b (compressed BCF)"
        ),
        choices=["auto", "v", "z", "u", "b"],
        default="auto",
    )
    grp_output.add_argument(
        "--write-index",
        help="Index the output (requires -O z or -O b)",
        action="store_true",
        default=False,
    )
    grp_output.add_argument(
        "--summary",
        help="Write run statistics to this TSV file",
        type=parser_resolve_path,
        default=None,
        metavar="SUMMARY_TSV",
    )
    grp_output.add_argument(
        "--run-info-dir",
        help="Write run_info.txt into this directory",
        type=parser_resolve_path,
        default=None,
        metavar="DIR",
    )

    grp_log = parser.add_argument_group("Logging", "Logging verbosity and format")
    grp_log.add_argument(
        "-q",
        "--quiet",
        help="Suppress progress output",
        action="store_true",
        default=False,
    )
    grp_log.add_argument(
        "--progress",
        help="Show a progress bar on stderr",
        action="store_true",
        default=False,
    )
    grp_log.add_argument(
        "-L",
        "--log-level",
        help=(
            "Logging level (DEBUG, INFO, WARNING, ERROR); default depends on --quiet"
        ),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
    )
    grp_log.add_argument(
        "-F",
        "--log-format",
        help="Logging format: text or json",
        choices=["text", "json"],
        default="text",
    )

    return parser


def main() -> None:
    """CLI entry point.

    This function:
    1. Parses command line arguments
    2. Validates argument combinations
    3. Creates application configuration
    4. Runs the decomposition

    Example:
        >>> # Command line usage:
        >>> # python -m vcfmulti2one multi.vcf.gz -o split.vcf.gz -p --write-index
    """
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    parser = create_parser()
    args = parser.parse_args()

    validate_cli_arguments(args)

    config = Multi2OneConfig(
        input_vcf=args.input,
        output=args.output,
        output_format=args.output_format,
        include_samples=args.samples,
        arity_mismatch_policy=(
            ArityMismatchPolicy.DROP_FIELD if args.rm_att else ArityMismatchPolicy.FAIL
        ),
        skip_errors=args.skip_errors,
        summary_path=args.summary,
        run_info_dir=args.run_info_dir,
        write_index=args.write_index,
        progress=args.progress and not args.quiet,
        verbose=not args.quiet,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    app = Multi2OneApp(config, shutdown_checker=is_shutdown_requested)
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation interrupted by user. Exiting gracefully.", file=sys.stderr)
        sys.exit(1)
    except DecompositionError:
        # already logged by the application
        sys.exit(1)
    except Exception as e:
        if _shutdown_requested:
            print(f"\nGraceful shutdown completed. Error during shutdown: {e}", file=sys.stderr)
            sys.exit(1)
        else:
            raise
    if _shutdown_requested:
        sys.exit(130)


if __name__ == "__main__":
    main()
