"""Genotype conversion and utility functions."""

from typing import List, Optional, Sequence, Tuple

__all__ = [
    "is_symbolic_allele",
    "gt_to_alleles",
    "alleles_to_gt",
    "format_gt",
    "is_het",
]


def is_symbolic_allele(allele: Optional[str]) -> bool:
    """Return True if ``allele`` is a symbolic or breakend allele.

    Example:
        >>> is_symbolic_allele("<DEL>")
        True
        >>> is_symbolic_allele("G]17:198982]")
        True
        >>> is_symbolic_allele(".A")   # single breakend
        True
        >>> is_symbolic_allele("ACGT")
        False
        >>> is_symbolic_allele("*")    # spanning deletion
        False
    """
    if not allele:
        return False
    if allele.startswith("<") and allele.endswith(">"):
        return True
    if "[" in allele or "]" in allele:
        return True
    return len(allele) > 1 and (allele.startswith(".") or allele.endswith("."))


def gt_to_alleles(
    gt: Optional[Sequence[Optional[int]]], alleles: Sequence[str]
) -> Tuple[Optional[str], ...]:
    """Convert a GT tuple of allele indices into allele strings.

    Args:
        gt: Allele indices as returned by pysam (None for '.')
        alleles: Record alleles, reference first

    Returns:
        Allele strings, None where the index was missing

    Raises:
        IndexError: If an index does not refer to an allele of the record

    Example:
        >>> gt_to_alleles((0, 2), ("A", "C", "G"))
        ('A', 'G')
        >>> gt_to_alleles((None, 1), ("A", "C"))
        (None, 'C')
    """
    if gt is None:
        return ()
    out: List[Optional[str]] = []
    for idx in gt:
        if idx is None:
            out.append(None)
        elif 0 <= idx < len(alleles):
            out.append(alleles[idx])
        else:
            raise IndexError(
                f"GT allele index {idx} out of range for {len(alleles)} allele(s)"
            )
    return tuple(out)


def alleles_to_gt(
    called: Sequence[Optional[str]], alleles: Sequence[str]
) -> Tuple[Optional[int], ...]:
    """Convert allele strings back into GT indices against ``alleles``.

    Raises:
        ValueError: If a called allele is not one of ``alleles``

    Example:
        >>> alleles_to_gt(("A", "G"), ("A", "G"))
        (0, 1)
        >>> alleles_to_gt((None, "G"), ("A", "G"))
        (None, 1)
    """
    index = {allele: i for i, allele in enumerate(alleles)}
    out: List[Optional[int]] = []
    for allele in called:
        if allele is None:
            out.append(None)
        elif allele in index:
            out.append(index[allele])
        else:
            raise ValueError(f"Allele '{allele}' is not one of {list(alleles)}")
    return tuple(out)


def format_gt(called: Sequence[Optional[str]], phased: bool = False) -> str:
    """Render allele strings as a GT-like string for messages.

    Example:
        >>> format_gt(("A", "T"))
        'A/T'
        >>> format_gt(("A", None), phased=True)
        'A|.'
        >>> format_gt(())
        '.'
    """
    if not called:
        return "."
    sep = "|" if phased else "/"
    return sep.join("." if a is None else a for a in called)


def is_het(called: Sequence[Optional[str]]) -> bool:
    """Return True if the called alleles are not all identical.

    Missing slots are ignored.

    Example:
        >>> is_het(("A", "T"))
        True
        >>> is_het(("T", "T"))
        False
        >>> is_het(("T", None))
        False
    """
    present = [a for a in called if a is not None]
    return len(set(present)) > 1
