"""Record, genotype and annotation data structures."""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import ArityMismatch

__all__ = [
    "PROVENANCE_TAG",
    "Arity",
    "AnnotationValue",
    "GenotypeCall",
    "VariantRecord",
    "AlleleAnnotations",
]

PROVENANCE_TAG = "ORIGINAL_ALT_ALLELES"

Scalar = Union[str, int, float, bool, None]
AnnotationValue = Union[Scalar, Tuple[Scalar, ...]]


class Arity(Enum):
    """Array-arity convention of an INFO field (VCF ``Number=A`` / ``Number=R``)."""

    PER_ALT_ALLELE = "A"
    PER_ALLELE = "R"

    def expected_length(self, alt_count: int) -> int:
        """Number of values a field of this arity holds on a record with ``alt_count`` ALTs."""
        if self is Arity.PER_ALLELE:
            return alt_count + 1
        return alt_count


def _frozen_mapping(data: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class GenotypeCall:
    """One sample's genotype.

    Attributes:
        alleles: Called allele per chromosome copy; ``None`` marks a no-call slot
        phased: Whether the call is phased
        fields: Remaining per-sample FORMAT values, keyed by FORMAT ID
        converted: Set when alleles were rewritten during decomposition

    Example:
        >>> call = GenotypeCall(alleles=("A", "T"))
        >>> call.ploidy, call.is_called, call.is_no_call
        (2, True, False)
    """

    alleles: Tuple[Optional[str], ...] = ()
    phased: bool = False
    fields: Mapping[str, Any] = field(default_factory=dict)
    converted: bool = False

    def __post_init__(self):
        object.__setattr__(self, "alleles", tuple(self.alleles))
        object.__setattr__(self, "fields", _frozen_mapping(self.fields))

    @property
    def ploidy(self) -> int:
        return len(self.alleles)

    @property
    def is_called(self) -> bool:
        """True when at least one chromosome copy carries an allele."""
        return any(a is not None for a in self.alleles)

    @property
    def is_no_call(self) -> bool:
        return bool(self.alleles) and all(a is None for a in self.alleles)


@dataclass(frozen=True)
class VariantRecord:
    """A fully materialized variant site.

    Records are immutable; derived records are built with :meth:`derive`, so
    the source of a decomposition is never modified.

    Attributes:
        contig: Chromosome / contig name
        position: 1-based position
        reference: Reference allele
        alternates: Alternate alleles, in file order
        id: Variant ID or None
        end: Last reference position when set by INFO/END, else None
        qual: QUAL or None
        filters: FILTER names
        info: INFO values keyed by field ID
        samples: Genotypes keyed by sample name, in header order
    """

    contig: str
    position: int
    reference: str
    alternates: Tuple[str, ...]
    id: Optional[str] = None
    end: Optional[int] = None
    qual: Optional[float] = None
    filters: Tuple[str, ...] = ()
    info: Mapping[str, AnnotationValue] = field(default_factory=dict)
    samples: Mapping[str, GenotypeCall] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "alternates", tuple(self.alternates))
        object.__setattr__(self, "filters", tuple(self.filters))
        object.__setattr__(self, "info", _frozen_mapping(self.info))
        object.__setattr__(self, "samples", _frozen_mapping(self.samples))

    @property
    def alt_count(self) -> int:
        return len(self.alternates)

    @property
    def alleles(self) -> Tuple[str, ...]:
        return (self.reference,) + self.alternates

    @property
    def locus(self) -> str:
        return f"{self.contig}:{self.position}"

    def derive(self, **changes) -> "VariantRecord":
        """Return a copy of this record with ``changes`` substituted."""
        return replace(self, **changes)

    def without_samples(self) -> "VariantRecord":
        if not self.samples:
            return self
        return self.derive(samples={})


@dataclass(frozen=True)
class AlleleAnnotations:
    """An INFO array bound to the alternate alleles it is indexed by.

    Construction checks the array length once against the arity convention;
    every per-split value is then read through :meth:`for_alternate`, so the
    alternate list and the array can never be sliced out of step.

    Raises:
        ArityMismatch: If the number of values does not match the arity
    """

    field: str
    arity: Arity
    alternates: Tuple[str, ...]
    values: Tuple[Scalar, ...]
    locus: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "alternates", tuple(self.alternates))
        object.__setattr__(self, "values", tuple(self.values))
        expected = self.arity.expected_length(len(self.alternates))
        if len(self.values) != expected:
            raise ArityMismatch(self.field, expected, len(self.values), self.locus)

    def for_alternate(self, index: int) -> AnnotationValue:
        """Value carried by the split keeping ``alternates[index]``.

        ``Number=A`` arrays yield the single matching value; ``Number=R``
        arrays yield ``(reference value, matching value)``.
        """
        if not 0 <= index < len(self.alternates):
            raise IndexError(
                f"alternate index {index} out of range for INFO/{self.field}"
            )
        if self.arity is Arity.PER_ALLELE:
            return (self.values[0], self.values[index + 1])
        return self.values[index]