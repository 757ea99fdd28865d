"""VCF/BCF input via pysam."""

import sys
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Union

import pysam

from ..core.arity import AnnotationArityTable
from ..core.genotype_utils import gt_to_alleles
from ..core.models import GenotypeCall, VariantRecord

__all__ = ["VCFReader"]


class VCFReader:
    """Reads variant records from a VCF, VCF.gz or BCF file.

    Example:
        >>> with VCFReader(Path("input.vcf"), logger) as reader:
        ...     table = reader.arity_table()
        ...     for record in reader:
        ...         print(record.locus, record.alternates)
    """

    def __init__(
        self,
        vcf_path: Union[Path, str],
        logger: logging.Logger,
    ):
        """Open ``vcf_path`` ('-' reads stdin) and load its header."""
        self.vcf_path = vcf_path
        self.logger = logger
        try:
            self.vf = pysam.VariantFile(str(vcf_path))
        except (OSError, ValueError) as e:
            sys.exit(f"ERROR: Failed to read VCF/BCF headers via pysam: {e}")
        self.records_read = 0

    @property
    def header(self) -> "pysam.VariantHeader":
        return self.vf.header

    @property
    def samples(self) -> List[str]:
        return list(self.vf.header.samples)

    def arity_table(self) -> AnnotationArityTable:
        """Snapshot of the INFO ``Number`` declarations of the header."""
        numbers = [(name, str(meta.number)) for name, meta in self.vf.header.info.items()]
        table = AnnotationArityTable.from_numbers(numbers)
        if self.logger.isEnabledFor(logging.DEBUG):
            indexed = [name for name in table.fields() if table.arity_of(name)]
            self.logger.debug(
                f"INFO fields indexed by allele: {', '.join(indexed) or 'none'}"
            )
        return table

    def to_record(self, rec: "pysam.VariantRecord") -> VariantRecord:
        """Convert a pysam record into an immutable VariantRecord."""
        alternates = tuple(rec.alts or ())
        alleles = (rec.ref,) + alternates
        samples: Dict[str, GenotypeCall] = {}
        for name in rec.samples:
            data = rec.samples[name]
            try:
                called = gt_to_alleles(data.get("GT"), alleles)
            except IndexError as e:
                sys.exit(
                    f"ERROR: {rec.chrom}:{rec.pos}, Sample {name}: {e}. "
                    "Genotypes must refer to the REF or ALT alleles of the record."
                )
            fields = {key: value for key, value in data.items() if key != "GT"}
            samples[name] = GenotypeCall(
                alleles=called, phased=bool(data.phased), fields=fields
            )

        return VariantRecord(
            contig=rec.chrom,
            position=rec.pos,
            reference=rec.ref,
            alternates=alternates,
            id=rec.id,
            end=rec.stop if rec.stop != rec.start + len(rec.ref) else None,
            qual=rec.qual,
            filters=tuple(rec.filter.keys()),
            info=dict(rec.info.items()),
            samples=samples,
        )

    def __iter__(self) -> Iterator[VariantRecord]:
        for rec in self.vf:
            self.records_read += 1
            if self.records_read % 10000 == 0 and self.logger.isEnabledFor(
                logging.DEBUG
            ):
                self.logger.debug(
                    f"Read {self.records_read} variants (at {rec.chrom}:{rec.pos})..."
                )
            yield self.to_record(rec)

    def close(self) -> None:
        self.vf.close()

    def __enter__(self) -> "VCFReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
