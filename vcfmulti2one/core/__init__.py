"""Core decomposition logic for vcfmulti2one."""

from .errors import (
    DecompositionError,
    ArityMismatch,
    UnsupportedAlleleKind,
    EmptyAlternateSet,
    HeaderLookupFailure,
)
from .models import PROVENANCE_TAG, Arity, GenotypeCall, VariantRecord, AlleleAnnotations
from .arity import AnnotationArityTable, arity_from_number
from .allele_splitter import AlleleSplit, split_alleles
from .annotation_redistributor import AnnotationRedistributor, ArityMismatchPolicy
from .genotype_rewriter import GenotypeRewriter, collapse_other_alternates
from .engine import DecompositionEngine, EngineConfig, EngineState, EngineStats

__all__ = [
    "DecompositionError",
    "ArityMismatch",
    "UnsupportedAlleleKind",
    "EmptyAlternateSet",
    "HeaderLookupFailure",
    "PROVENANCE_TAG",
    "Arity",
    "GenotypeCall",
    "VariantRecord",
    "AlleleAnnotations",
    "AnnotationArityTable",
    "arity_from_number",
    "AlleleSplit",
    "split_alleles",
    "AnnotationRedistributor",
    "ArityMismatchPolicy",
    "GenotypeRewriter",
    "collapse_other_alternates",
    "DecompositionEngine",
    "EngineConfig",
    "EngineState",
    "EngineStats",
]
