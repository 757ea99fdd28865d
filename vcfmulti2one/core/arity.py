"""Immutable snapshot of declared INFO field arities."""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .errors import HeaderLookupFailure
from .models import Arity

__all__ = ["AnnotationArityTable", "arity_from_number"]


def arity_from_number(number: Optional[str]) -> Optional[Arity]:
    """Map a header ``Number`` value to an arity convention.

    Example:
        >>> arity_from_number("A")
        <Arity.PER_ALT_ALLELE: 'A'>
        >>> arity_from_number("R")
        <Arity.PER_ALLELE: 'R'>
        >>> arity_from_number("1") is None
        True
    """
    if number is None:
        return None
    number = str(number)
    for arity in Arity:
        if arity.value == number:
            return arity
    return None


class AnnotationArityTable:
    """Read-only field name -> arity lookup, built once per input header.

    Only ``Number=A`` and ``Number=R`` fields are index-dependent; every other
    declared field, and any field missing from the header, has no arity and is
    copied verbatim onto split records. The table holds no other state, so one
    instance can be shared by any number of engines.
    """

    def __init__(self, arities: Mapping[str, Optional[Arity]]):
        self._arities: Mapping[str, Optional[Arity]] = MappingProxyType(dict(arities))

    @classmethod
    def from_numbers(
        cls, numbers: Iterable[Tuple[str, Optional[str]]]
    ) -> "AnnotationArityTable":
        """Build a table from ``(field ID, Number)`` pairs of INFO header lines."""
        arities: Dict[str, Optional[Arity]] = {
            name: arity_from_number(number) for name, number in numbers
        }
        return cls(arities)

    def __contains__(self, name: object) -> bool:
        return name in self._arities

    def __len__(self) -> int:
        return len(self._arities)

    def fields(self) -> Tuple[str, ...]:
        return tuple(self._arities)

    def require(self, name: str) -> Optional[Arity]:
        """Arity of a declared field.

        Raises:
            HeaderLookupFailure: If ``name`` is not declared
        """
        if name not in self._arities:
            raise HeaderLookupFailure(name)
        return self._arities[name]

    def arity_of(self, name: str) -> Optional[Arity]:
        """Arity of ``name``, or None when it has none or is undeclared."""
        return self._arities.get(name)
