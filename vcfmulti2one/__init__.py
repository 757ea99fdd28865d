"""vcfmulti2one - split multi-allelic VCF records into bi-allelic records.

One variant with N ALT alleles becomes N variants with one ALT allele each.
INFO arrays declared ``Number=A`` / ``Number=R`` are re-sliced per ALT, and
sample genotypes are rewritten against the ALT kept by each split.
"""

from .version import __version__
from .app import Multi2OneApp, Multi2OneConfig
from .core import (
    ArityMismatchPolicy,
    DecompositionEngine,
    EngineConfig,
    GenotypeCall,
    VariantRecord,
    AnnotationArityTable,
)

__all__ = [
    "__version__",
    "Multi2OneApp",
    "Multi2OneConfig",
    "ArityMismatchPolicy",
    "DecompositionEngine",
    "EngineConfig",
    "GenotypeCall",
    "VariantRecord",
    "AnnotationArityTable",
]
