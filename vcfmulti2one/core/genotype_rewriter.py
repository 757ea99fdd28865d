"""Per-sample genotype rewriting for split records."""

import logging
from typing import List, Optional, Sequence

from .errors import DecompositionError, UnsupportedAlleleKind
from .genotype_utils import format_gt, is_het, is_symbolic_allele
from .models import GenotypeCall

__all__ = ["collapse_other_alternates", "GenotypeRewriter"]


def collapse_other_alternates(
    called: Sequence[Optional[str]], reference: str, selected: str
) -> List[Optional[str]]:
    """Replace every allele that is neither REF nor ``selected`` with REF.

    This is the genotype rule of decomposition. It is lossy: a sample called
    ``alt0/alt2`` becomes ``ref/ref`` on the ``alt1`` split and ``alt0/ref``
    on the ``alt0`` split. No-call slots are kept.

    Example:
        >>> collapse_other_alternates(["C", "T"], "A", "G")
        ['A', 'A']
        >>> collapse_other_alternates(["C", "T"], "A", "C")
        ['C', 'A']
        >>> collapse_other_alternates([None, "T"], "A", "C")
        [None, 'A']
    """
    return [
        allele if allele is None or allele in (reference, selected) else reference
        for allele in called
    ]


class GenotypeRewriter:
    """Rewrites sample genotypes for the split keeping one ALT allele."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def rewrite(
        self,
        call: GenotypeCall,
        sample: str,
        reference: str,
        selected: str,
        original_alternates: Sequence[str],
        locus: Optional[str] = None,
    ) -> GenotypeCall:
        """Genotype of ``sample`` on the split keeping ``selected``.

        Uncalled and no-call genotypes are returned as is. When an allele is
        replaced the result is marked ``converted``; sample ploidy and phasing
        are kept and the other FORMAT values are cleared, since they described
        the multi-allelic call.

        Raises:
            UnsupportedAlleleKind: If the call contains a symbolic allele
            DecompositionError: If the call contains an allele the record lacks
        """
        if not call.is_called or call.is_no_call:
            return call

        known = {reference, *original_alternates}
        for allele in call.alleles:
            if allele is None:
                continue
            if is_symbolic_allele(allele):
                raise UnsupportedAlleleKind(allele, sample, locus)
            if allele not in known:
                raise DecompositionError(
                    f"sample '{sample}' is called with allele '{allele}' "
                    "which is not an allele of the record",
                    locus,
                )

        rewritten = collapse_other_alternates(call.alleles, reference, selected)
        if tuple(rewritten) == call.alleles:
            return call

        if self.logger.isEnabledFor(logging.DEBUG) and is_het(call.alleles):
            self.logger.debug(
                f"{locus or '?'} {sample}: "
                f"{format_gt(call.alleles, call.phased)} -> "
                f"{format_gt(rewritten, call.phased)} on ALT {selected}"
            )
        return GenotypeCall(
            alleles=tuple(rewritten),
            phased=call.phased,
            fields={},
            converted=True,
        )
