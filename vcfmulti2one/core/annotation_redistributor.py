"""Re-slicing of INFO annotations onto split records."""

import logging
from enum import Enum
from typing import Dict, List, Optional, Set

from .arity import AnnotationArityTable
from .errors import ArityMismatch, HeaderLookupFailure
from .models import PROVENANCE_TAG, AlleleAnnotations, AnnotationValue, VariantRecord

__all__ = ["ArityMismatchPolicy", "AnnotationRedistributor"]


class ArityMismatchPolicy(Enum):
    """What to do with an INFO field whose values disagree with its arity."""

    FAIL = "fail"
    DROP_FIELD = "drop"


class AnnotationRedistributor:
    """Computes the INFO mapping of every split of a multi-allelic record."""

    def __init__(
        self,
        arity_table: AnnotationArityTable,
        policy: ArityMismatchPolicy,
        logger: Optional[logging.Logger] = None,
    ):
        self.arity_table = arity_table
        self.policy = policy
        self.logger = logger or logging.getLogger(__name__)
        self.dropped_fields = 0
        self.undeclared_fields: Set[str] = set()

    def _bind(self, record: VariantRecord, name: str, value: AnnotationValue):
        """Bind an index-dependent field to the record's ALT alleles.

        Returns None when the field has no declared arity.

        Raises:
            ArityMismatch: If the field is declared per-allele but the values
                are a scalar or have the wrong length
        """
        try:
            arity = self.arity_table.require(name)
        except HeaderLookupFailure as e:
            if name not in self.undeclared_fields:
                self.undeclared_fields.add(name)
                if self.logger.isEnabledFor(logging.DEBUG):
                    self.logger.debug(f"{e}; copying it unchanged")
            return None
        if arity is None:
            return None
        if not isinstance(value, (tuple, list)):
            raise ArityMismatch(
                name, arity.expected_length(record.alt_count), None, record.locus
            )
        return AlleleAnnotations(
            field=name,
            arity=arity,
            alternates=record.alternates,
            values=tuple(value),
            locus=record.locus,
        )

    def redistribute(
        self, record: VariantRecord, provenance: str
    ) -> List[Dict[str, AnnotationValue]]:
        """Build one INFO mapping per ALT allele of ``record``.

        Args:
            record: Source record with at least two ALT alleles
            provenance: Value of the provenance tag for every split

        Returns:
            INFO mappings, indexed like ``record.alternates``

        Raises:
            ArityMismatch: Under ``ArityMismatchPolicy.FAIL`` only
        """
        splits: List[Dict[str, AnnotationValue]] = [
            {} for _ in range(record.alt_count)
        ]
        for name, value in record.info.items():
            if name == PROVENANCE_TAG:
                continue
            try:
                bound = self._bind(record, name, value)
            except ArityMismatch as e:
                if self.policy is ArityMismatchPolicy.FAIL:
                    raise
                self.dropped_fields += 1
                self.logger.warning(f"Removing attribute from split records: {e}")
                continue

            for index, info in enumerate(splits):
                info[name] = value if bound is None else bound.for_alternate(index)

        for info in splits:
            info[PROVENANCE_TAG] = provenance
        return splits
