"""VCF/BCF output via pysam."""

import logging
from pathlib import Path
from math import comb
from typing import Any, Dict, Iterable, Optional, Set, Tuple, Union
from dataclasses import dataclass

import pysam

from ..core.genotype_utils import alleles_to_gt
from ..core.models import PROVENANCE_TAG, VariantRecord

__all__ = ["WriteConfig", "VCFWriter", "MODE_MAP", "output_path_for"]

# bcftools format letters -> pysam write modes
MODE_MAP = {"v": "w", "z": "wz", "u": "wb0", "b": "wb"}

PROVENANCE_DESCRIPTION = (
    "The variant was split from a multi-allelic site; "
    "original ALT alleles separated by '|'"
)

# FORMAT Number values whose length depends on the number of alleles
_ALLELE_SIZED = {"A", "R", "G"}

UNDECLARED_DESCRIPTION = "Not declared in the input header"


def _guess_definition(kind: str, value: Any) -> Tuple[str, str]:
    """``(Number, Type)`` for a key the input header does not declare.

    Example:
        >>> _guess_definition("INFO", True)
        ('0', 'Flag')
        >>> _guess_definition("FORMAT", (1, 2))
        ('.', 'Integer')
    """
    if kind == "INFO" and isinstance(value, bool):
        return "0", "Flag"
    values = value if isinstance(value, (tuple, list)) else (value,)
    number = "." if isinstance(value, (tuple, list)) else "1"
    present = [v for v in values if v is not None]
    if present and all(isinstance(v, int) and not isinstance(v, bool) for v in present):
        return number, "Integer"
    if present and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in present):
        return number, "Float"
    return number, "String"


@dataclass
class WriteConfig:
    """Configuration for VCF writing.

    Attributes:
        include_samples: Write sample columns (False writes a sites-only VCF)
        output_format: Output format identifier (v, z, u, b)

    Example:
        >>> config = WriteConfig(include_samples=True, output_format="z")
        >>> print(f"Output: {config.output_format}, samples: {config.include_samples}")
        Output: z, samples: True
    """

    include_samples: bool
    output_format: str = "v"  # one of: v|z|u|b (bcftools letters)


def output_path_for(path: Union[Path, str]) -> str:
    """pysam path string; '-' stands for stdout."""
    return "-" if str(path) == "-" else str(path)


class VCFWriter:
    """Writes decomposed records, deriving the output header from the input one."""

    def __init__(
        self,
        output: Union[Path, str],
        input_header: "pysam.VariantHeader",
        config: WriteConfig,
        logger: Optional[logging.Logger] = None,
    ):
        """Open ``output`` for writing.

        Raises:
            ValueError: If the output format letter is unknown
        """
        self.logger = logger or logging.getLogger(__name__)
        self.config = config
        if config.output_format not in MODE_MAP:
            raise ValueError(f"Unsupported output_format: {config.output_format}")
        out_mode: Any = MODE_MAP[config.output_format]

        self.input_header = input_header
        self.header = self.build_header(input_header, config.include_samples)
        self._format_numbers: Dict[str, str] = {
            name: str(meta.number) for name, meta in self.header.formats.items()
        }
        self.output = output
        self.out = pysam.VariantFile(
            output_path_for(output), mode=out_mode, header=self.header
        )
        self.records_written = 0
        self._left_out: Set[Tuple[str, str]] = set()

    @staticmethod
    def build_header(
        input_header: "pysam.VariantHeader", include_samples: bool
    ) -> "pysam.VariantHeader":
        """Copy the input header, declare the provenance tag, optionally drop samples."""
        header = pysam.VariantHeader()
        for hrec in input_header.records:
            if hrec.key == "fileformat":
                continue
            if hrec.key == "FILTER" and hrec.get("ID") == "PASS":
                continue
            header.add_record(hrec)
        if PROVENANCE_TAG not in header.info:
            header.info.add(PROVENANCE_TAG, 1, "String", PROVENANCE_DESCRIPTION)
        if include_samples:
            for sample in input_header.samples:
                header.add_sample(sample)
        return header

    def write(self, record: VariantRecord) -> None:
        """Write one record.

        INFO and FORMAT keys missing from the input header are declared in
        the output header as long as it has not been written yet.
        """
        self._declare_keys(record)
        stop = record.end
        if stop is None:
            stop = record.position - 1 + len(record.reference)
        out_rec = self.out.new_record(
            contig=record.contig,
            start=record.position - 1,
            stop=stop,
            alleles=record.alleles,
            id=record.id,
            qual=record.qual,
            filter=list(record.filters) or None,
        )
        for key, value in record.info.items():
            if value is None or ("INFO", key) in self._left_out:
                continue
            out_rec.info[key] = value

        if self.config.include_samples:
            self._write_samples(out_rec, record)

        self.out.write(out_rec)
        self.records_written += 1

    def _declare_keys(self, record: VariantRecord) -> None:
        for key, value in record.info.items():
            if value is not None:
                self._declare("INFO", key, value, record.locus)
        if not self.config.include_samples:
            return
        for call in record.samples.values():
            if call.alleles:
                self._declare("FORMAT", "GT", "", record.locus)
            for key, value in call.fields.items():
                if value is not None:
                    self._declare("FORMAT", key, value, record.locus)

    def _declare(self, kind: str, key: str, value: Any, locus: str) -> None:
        """Make sure ``key`` is declared in the output header.

        htslib adds keys it meets on a record to the reader's header, so the
        definition is copied from there when it exists and guessed from the
        value otherwise. Keys first met after the output header is on disk
        are left out of the output.
        """
        out_meta = self.out.header.info if kind == "INFO" else self.out.header.formats
        if key in out_meta or (kind, key) in self._left_out:
            return
        if self.out.header_written:
            self._left_out.add((kind, key))
            self.logger.warning(
                f"{locus}: {kind}/{key} is not declared in the header and first "
                "appears after the output header was written; leaving it out"
            )
            return

        in_meta = self.input_header.info if kind == "INFO" else self.input_header.formats
        if key in in_meta and in_meta[key].record is not None:
            self.out.header.add_record(in_meta[key].record)
        else:
            number, type_ = _guess_definition(kind, value)
            out_meta.add(key, number, type_, UNDECLARED_DESCRIPTION)
        if kind == "FORMAT":
            self._format_numbers[key] = str(self.out.header.formats[key].number)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"{locus}: declared {kind}/{key} in the output header")

    def _fits_alleles(self, key: str, value: Any, alt_count: int, ploidy: int) -> bool:
        """False for an allele-sized FORMAT value sized for another allele count."""
        number = self._format_numbers.get(key)
        if number not in _ALLELE_SIZED or not isinstance(value, (tuple, list)):
            return True
        if number == "A":
            expected = alt_count
        elif number == "R":
            expected = alt_count + 1
        else:
            expected = comb(alt_count + ploidy, ploidy)
        return len(value) == expected

    def _write_samples(self, out_rec: "pysam.VariantRecord", record: VariantRecord) -> None:
        dropped: Set[str] = set()
        for name, call in record.samples.items():
            sample = out_rec.samples[name]
            if call.alleles and ("FORMAT", "GT") not in self._left_out:
                sample["GT"] = alleles_to_gt(call.alleles, record.alleles)
                sample.phased = call.phased
            for key, value in call.fields.items():
                if value is None or ("FORMAT", key) in self._left_out:
                    continue
                if not self._fits_alleles(key, value, record.alt_count, call.ploidy):
                    dropped.add(key)
                    continue
                sample[key] = value
        if dropped and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"{record.locus}: FORMAT {', '.join(sorted(dropped))} left missing "
                "(sized for the multi-allelic site)"
            )

    def write_all(self, records: Iterable[VariantRecord]) -> int:
        """Write every record of ``records``; returns the number written."""
        before = self.records_written
        for record in records:
            self.write(record)
        return self.records_written - before

    def close(self) -> None:
        self.out.close()
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Wrote {self.records_written} variants to {self.output}"
            )

    def __enter__(self) -> "VCFWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
