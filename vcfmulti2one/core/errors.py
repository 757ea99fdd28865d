"""Exceptions raised while decomposing multi-allelic records."""

from typing import Optional

__all__ = [
    "DecompositionError",
    "ArityMismatch",
    "UnsupportedAlleleKind",
    "EmptyAlternateSet",
    "HeaderLookupFailure",
]


class DecompositionError(Exception):
    """Base class for per-record decomposition failures.

    Attributes:
        locus: ``contig:position`` of the offending record, when known
    """

    def __init__(self, message: str, locus: Optional[str] = None):
        self.locus = locus
        if locus:
            message = f"{locus}: {message}"
        super().__init__(message)


class ArityMismatch(DecompositionError):
    """Declared INFO arity disagrees with the number of values on the record."""

    def __init__(
        self,
        field: str,
        expected: int,
        actual: Optional[int],
        locus: Optional[str] = None,
    ):
        self.field = field
        self.expected = expected
        self.actual = actual
        if actual is None:
            detail = f"got a scalar, expected {expected} value(s)"
        else:
            detail = f"got {actual} value(s), expected {expected}"
        super().__init__(f"INFO/{field}: {detail}", locus)


class UnsupportedAlleleKind(DecompositionError):
    """A called genotype references a symbolic or structural allele."""

    def __init__(self, allele: str, sample: str, locus: Optional[str] = None):
        self.allele = allele
        self.sample = sample
        super().__init__(
            f"sample '{sample}' is called with symbolic allele '{allele}', "
            "which cannot be decomposed",
            locus,
        )


class EmptyAlternateSet(DecompositionError):
    """The record has no alternate allele."""

    pass


class HeaderLookupFailure(DecompositionError):
    """An INFO field is not declared in the header."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"INFO/{field} is not declared in the header")
