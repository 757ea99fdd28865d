import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from vcfmulti2one.core import GenotypeCall, VariantRecord

HEADER_LINES = [
    "##fileformat=VCFv4.2",
    "##source=vcfmulti2one-tests",
    "##contig=<ID=1,length=100000>",
    '##INFO=<ID=AC,Number=A,Type=Integer,Description="Allele count per ALT">',
    '##INFO=<ID=AN,Number=1,Type=Integer,Description="Total number of alleles">',
    '##INFO=<ID=RC,Number=R,Type=Integer,Description="Read count per allele">',
    '##INFO=<ID=DB,Number=0,Type=Flag,Description="dbSNP membership">',
    '##INFO=<ID=CSQ,Number=.,Type=String,Description="Consequences">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">',
    '##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths">',
]


def _artifacts_enabled() -> bool:
    value = os.getenv("VCFMULTI2ONE_SAVE_VCFS", "0")
    return value.lower() in ("1", "true", "yes", "on")


def save_artifact(src: Path, subdir: str = ""):
    if not _artifacts_enabled():
        return
    src = Path(src)
    dst_dir = Path(__file__).resolve().parents[1] / "saved_vcfs" / subdir
    dst_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst_dir / src.name)


def write_vcf(
    path: Path,
    samples: List[str],
    variants: List[Dict],
    extra_header: Optional[List[str]] = None,
):
    """
    Write a small VCF with provided variants.

    Each variant dict may contain keys:
      - chrom (str), pos (int), id (str), ref (str), alt (str, comma-separated)
      - qual (str), info (str, raw INFO column)
      - format (str, default "GT")
      - genotypes (List[str]) aligned to samples order
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
    if samples:
        columns += ["FORMAT"] + samples
    with open(path, "w") as f:
        for line in HEADER_LINES + (extra_header or []):
            f.write(line + "\n")
        f.write("\t".join(columns) + "\n")
        for v in variants:
            line = [
                v.get("chrom", "1"),
                str(v.get("pos", 1)),
                v.get("id", "."),
                v.get("ref", "A"),
                v.get("alt", "T"),
                v.get("qual", "."),
                "PASS",
                v.get("info", "."),
            ]
            if samples:
                line += [v.get("format", "GT")] + v["genotypes"]
            f.write("\t".join(line) + "\n")
    save_artifact(path)


def make_record(
    alternates=("C", "G", "T"),
    reference: str = "A",
    info: Optional[Dict] = None,
    samples: Optional[Dict[str, GenotypeCall]] = None,
    position: int = 100,
) -> VariantRecord:
    """In-memory record on contig 1."""
    return VariantRecord(
        contig="1",
        position=position,
        reference=reference,
        alternates=tuple(alternates),
        id="rs1",
        qual=50.0,
        filters=("PASS",),
        info=info or {},
        samples=samples or {},
    )


def gt(*alleles, phased: bool = False, **fields) -> GenotypeCall:
    return GenotypeCall(alleles=alleles, phased=phased, fields=fields)
