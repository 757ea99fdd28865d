"""Index creation for written variant files (VCF.gz/BCF)."""

from pathlib import Path
from typing import Optional
import logging
import subprocess

import pysam

__all__ = ["index_output", "infer_format_letter"]


def infer_format_letter(path: Path) -> str:
    """Infer bcftools-style format letter from filename.

    Returns one of: v (VCF), z (VCF.gz), b (BCF). Defaults to 'v'.

    Example:
        >>> infer_format_letter(Path("out.vcf.gz"))
        'z'
        >>> infer_format_letter(Path("out.bcf"))
        'b'
        >>> infer_format_letter(Path("-"))
        'v'
    """
    name = str(path)
    if name.endswith(".vcf.gz") or name.endswith(".vcf.bgz"):
        return "z"
    if name.endswith(".bcf"):
        return "b"
    return "v"


def index_output(
    vpath: Path, fmt_letter: str, logger: Optional[logging.Logger]
) -> Optional[Path]:
    """Index a freshly written variant file.

    - For 'z' (VCF.gz): tabix index (.tbi) via pysam
    - For 'b' (BCF): CSI index via bcftools
    - For 'v' and 'u': nothing to index

    Returns:
        Path of the index, or None when the format cannot be indexed

    Raises:
        RuntimeError: If the index could not be built
    """
    if fmt_letter in ("v", "u"):
        if logger and logger.isEnabledFor(logging.INFO):
            logger.info(
                "Output is not block-compressed; no index created"
            )
        return None

    if fmt_letter == "z":
        try:
            index_path = pysam.tabix_index(
                str(vpath), preset="vcf", force=True, keep_original=True
            )
        except (OSError, ValueError) as e:
            raise RuntimeError(f"tabix indexing of {vpath} failed: {e}")
        if logger and logger.isEnabledFor(logging.INFO):
            logger.info(f"Index written: {index_path}")
        return Path(index_path)

    if fmt_letter == "b":
        _run_bcftools_index(vpath, logger)
        return Path(str(vpath) + ".csi")

    raise RuntimeError(f"Unknown output format '{fmt_letter}'")


def _run_bcftools_index(vpath: Path, logger: Optional[logging.Logger]) -> None:
    """Run bcftools index --csi on the given file, raising on failure."""
    cmd = ["bcftools", "index", "--csi", "-f", str(vpath)]
    try:
        res = subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
        if logger and logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"bcftools index stdout: {res.stdout.strip()}")
    except FileNotFoundError:
        msg = "bcftools not found in PATH; please install bcftools to index BCF output"
        if logger:
            logger.error(msg)
        raise RuntimeError(msg)
    except subprocess.CalledProcessError as e:
        if logger:
            logger.error(f"bcftools index failed: {e.stderr.strip()}")
        raise RuntimeError(f"bcftools index failed with code {e.returncode}")
