"""Multi-allelic record decomposition engine."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from .allele_splitter import split_alleles
from .annotation_redistributor import AnnotationRedistributor, ArityMismatchPolicy
from .arity import AnnotationArityTable
from .errors import DecompositionError, EmptyAlternateSet
from .genotype_rewriter import GenotypeRewriter
from .models import GenotypeCall, VariantRecord

__all__ = ["EngineConfig", "EngineState", "EngineStats", "DecompositionEngine"]


@dataclass
class EngineConfig:
    """Configuration for the decomposition engine.

    Attributes:
        include_samples: Keep genotypes (True) or strip all sample data (False)
        arity_mismatch_policy: Fail the record or drop the offending INFO field
    """

    include_samples: bool
    arity_mismatch_policy: ArityMismatchPolicy


class EngineState(Enum):
    READY = "ready"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class EngineStats:
    """Counters collected over one run."""

    records_read: int = 0
    records_passed_through: int = 0
    records_split: int = 0
    records_without_alt: int = 0
    records_failed: int = 0
    splits_emitted: int = 0
    genotypes_converted: int = 0
    fields_dropped: int = 0
    alt_counts: Counter = field(default_factory=Counter)  # ALT count -> records

    @property
    def records_written(self) -> int:
        return self.records_passed_through + self.splits_emitted

    def as_dict(self) -> Dict[str, int]:
        return {
            "records_read": self.records_read,
            "records_passed_through": self.records_passed_through,
            "records_split": self.records_split,
            "records_without_alt": self.records_without_alt,
            "records_failed": self.records_failed,
            "splits_emitted": self.splits_emitted,
            "records_written": self.records_written,
            "genotypes_converted": self.genotypes_converted,
            "fields_dropped": self.fields_dropped,
        }


class DecompositionEngine:
    """Turns 'one variant with N ALT alleles' into 'N variants with one ALT'.

    Records are processed independently. A multi-allelic record is fully
    decomposed before any of its splits is returned, so a failure never
    leaves a partial set of splits behind.
    """

    def __init__(
        self,
        arity_table: AnnotationArityTable,
        config: EngineConfig,
        logger: Optional[logging.Logger] = None,
        shutdown_checker: Optional[Callable[[], bool]] = None,
    ):
        """Initialize the engine.

        Args:
            arity_table: INFO arity snapshot of the input header
            config: Engine configuration
            logger: Logger for warnings and progress
            shutdown_checker: Polled between records; True stops the run
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.shutdown_checker = shutdown_checker
        self.redistributor = AnnotationRedistributor(
            arity_table, config.arity_mismatch_policy, self.logger
        )
        self.genotype_rewriter = GenotypeRewriter(self.logger)
        self.state = EngineState.READY
        self.stats = EngineStats()

    def decompose(self, record: VariantRecord) -> List[VariantRecord]:
        """Decompose a single record.

        Returns:
            Nothing for a record without ALT, the record itself (samples
            stripped if configured) for a bi-allelic record, or one record per
            ALT allele, in ALT order.

        Raises:
            DecompositionError: If the record cannot be decomposed; the engine
                is left in the FAILED state until the next call
        """
        self.state = EngineState.READY
        self.stats.records_read += 1
        self.stats.alt_counts[record.alt_count] += 1

        if record.alt_count == 0:
            self.stats.records_without_alt += 1
            self.logger.warning(
                str(EmptyAlternateSet("no ALT allele, removing variant", record.locus))
            )
            return []

        if record.alt_count == 1:
            self.stats.records_passed_through += 1
            if self.config.include_samples:
                return [record]
            return [record.without_samples()]

        self.state = EngineState.EMITTING
        try:
            splits = self._split(record)
        except DecompositionError:
            self.state = EngineState.FAILED
            raise
        self.stats.records_split += 1
        self.stats.splits_emitted += len(splits)
        self.state = EngineState.READY
        return splits

    def _split(self, record: VariantRecord) -> List[VariantRecord]:
        allele_split = split_alleles(record)
        infos = self.redistributor.redistribute(record, allele_split.provenance)
        self.stats.fields_dropped = self.redistributor.dropped_fields

        splits: List[VariantRecord] = []
        for index, (reference, selected) in enumerate(allele_split.pairs):
            samples: Dict[str, GenotypeCall] = {}
            if self.config.include_samples:
                for name, call in record.samples.items():
                    samples[name] = self.genotype_rewriter.rewrite(
                        call,
                        name,
                        reference,
                        selected,
                        record.alternates,
                        record.locus,
                    )
            splits.append(
                record.derive(
                    reference=reference,
                    alternates=(selected,),
                    info=infos[index],
                    samples=samples,
                )
            )

        self.stats.genotypes_converted += sum(
            1 for s in splits for call in s.samples.values() if call.converted
        )
        return splits

    def run(
        self, records: Iterable[VariantRecord], skip_errors: bool = False
    ) -> Iterator[VariantRecord]:
        """Decompose a stream of records.

        Args:
            records: Input records
            skip_errors: Log and skip records that fail instead of raising

        Yields:
            Output records, in input order and ALT order within a record
        """
        for record in records:
            if self.shutdown_checker and self.shutdown_checker():
                if self.logger.isEnabledFor(logging.INFO):
                    self.logger.info("Graceful shutdown requested. Stopping decomposition.")
                break
            try:
                outputs = self.decompose(record)
            except DecompositionError as e:
                if not skip_errors:
                    raise
                self.stats.records_failed += 1
                self.logger.error(f"Skipping variant: {e}")
                continue
            yield from outputs
        self.state = EngineState.DONE
