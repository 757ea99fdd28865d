"""Split a multi-allelic site into (REF, ALT) pairs."""

from dataclasses import dataclass
from typing import Tuple

from .models import VariantRecord

__all__ = ["AlleleSplit", "split_alleles", "provenance_string"]


@dataclass(frozen=True)
class AlleleSplit:
    """Allele pairs of one multi-allelic record.

    Attributes:
        pairs: ``(reference, alternates[i])`` for every ALT, in file order
        provenance: Original ALT alleles joined with ``|``
    """

    pairs: Tuple[Tuple[str, str], ...]
    provenance: str

    def __len__(self) -> int:
        return len(self.pairs)


def provenance_string(alternates: Tuple[str, ...]) -> str:
    """Join ALT alleles with ``|`` keeping their original order.

    Example:
        >>> provenance_string(("A", "C", "<DEL>"))
        'A|C|<DEL>'
    """
    return "|".join(alternates)


def split_alleles(record: VariantRecord) -> AlleleSplit:
    """Pair the reference with each alternate allele of ``record``.

    ALT order is preserved; INFO arrays are indexed by it.

    Raises:
        ValueError: If the record has fewer than two ALT alleles
    """
    if record.alt_count < 2:
        raise ValueError(
            f"{record.locus}: expected at least 2 ALT alleles, found {record.alt_count}"
        )
    pairs = tuple((record.reference, alt) for alt in record.alternates)
    return AlleleSplit(pairs=pairs, provenance=provenance_string(record.alternates))
