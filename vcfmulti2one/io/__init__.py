"""Input/Output modules for file operations."""

from .vcf_reader import VCFReader
from .vcf_writer import VCFWriter, WriteConfig
from .summary_writer import SummaryWriter
from .run_info_writer import RunInfoWriter

__all__ = [
    "VCFReader",
    "VCFWriter",
    "WriteConfig",
    "SummaryWriter",
    "RunInfoWriter",
]
