"""Main application coordinator for vcfmulti2one."""

import logging
from pathlib import Path
from typing import Optional, Union, Callable
from dataclasses import dataclass

from tqdm import tqdm

from .core import (
    ArityMismatchPolicy,
    DecompositionEngine,
    DecompositionError,
    EngineConfig,
    EngineStats,
)
from .io import VCFReader, VCFWriter, WriteConfig, SummaryWriter, RunInfoWriter
from .utils import MemoryMonitor, setup_logger, index_output

__all__ = ["Multi2OneConfig", "Multi2OneApp"]


@dataclass
class Multi2OneConfig:
    """Configuration for the vcfmulti2one application.

    Attributes:
        input_vcf: Input VCF/BCF path ('-' for stdin)
        output: Output path ('-' for stdout)
        output_format: Output format identifier (v, z, u, b)
        include_samples: Keep genotypes; False writes a sites-only VCF
        arity_mismatch_policy: Fail, or drop INFO fields with a bad value count
        skip_errors: Log and skip variants that cannot be decomposed
        summary_path: Optional TSV receiving run statistics
        run_info_dir: Optional directory receiving run_info.txt
        write_index: Index the output (VCF.gz or BCF only)
        progress: Show a progress bar on stderr
        verbose: Whether to enable verbose logging
        log_level: Logging level override
        log_format: Logging format (text or json)

    Example:
        >>> from pathlib import Path
        >>> config = Multi2OneConfig(
        ...     input_vcf=Path("multi.vcf"),
        ...     output=Path("split.vcf.gz"),
        ...     output_format="z",
        ...     include_samples=True,
        ... )
        >>> print(f"Input: {config.input_vcf}, policy: {config.arity_mismatch_policy.value}")
        Input: multi.vcf, policy: fail
    """

    input_vcf: Union[Path, str]
    output: Union[Path, str] = "-"
    output_format: str = "v"  # one of: v|z|u|b (bcftools letters)
    include_samples: bool = False
    arity_mismatch_policy: ArityMismatchPolicy = ArityMismatchPolicy.FAIL
    skip_errors: bool = False
    summary_path: Optional[Path] = None
    run_info_dir: Optional[Path] = None
    write_index: bool = False
    progress: bool = False
    verbose: bool = True
    log_level: Optional[str] = None
    log_format: str = "text"


class Multi2OneApp:
    """Wires reader, decomposition engine and writer together."""

    def __init__(
        self,
        config: Multi2OneConfig,
        shutdown_checker: Optional[Callable[[], bool]] = None,
    ):
        """Initialize the application.

        Args:
            config: Application configuration
            shutdown_checker: Optional function to check if shutdown was requested
        """
        self.config = config
        self.shutdown_checker = shutdown_checker
        self.logger = setup_logger(
            "vcfmulti2one", config.log_level, config.log_format, config.verbose
        )
        self.memory_monitor = MemoryMonitor(self.logger)
        self.summary_writer = SummaryWriter(self.logger)
        self.run_info_writer = RunInfoWriter(self.memory_monitor)
        self.engine: Optional[DecompositionEngine] = None

    def run(self) -> EngineStats:
        """Execute the pipeline.

        1. Read the input header and snapshot INFO arities
        2. Stream records through the decomposition engine into the writer
        3. Optionally index the output and write summary files

        Returns:
            Statistics of the run

        Raises:
            DecompositionError: If a variant cannot be decomposed and
                ``skip_errors`` is off
        """
        self.memory_monitor.check_memory_and_warn("initialization")

        with VCFReader(self.config.input_vcf, self.logger) as reader:
            engine_config = EngineConfig(
                include_samples=self.config.include_samples,
                arity_mismatch_policy=self.config.arity_mismatch_policy,
            )
            self.engine = DecompositionEngine(
                reader.arity_table(),
                engine_config,
                self.logger,
                self.shutdown_checker,
            )
            if self.logger.isEnabledFor(logging.INFO):
                self.logger.info(
                    f"Decomposing {self.config.input_vcf} "
                    f"({len(reader.samples)} samples, "
                    f"genotypes {'kept' if self.config.include_samples else 'removed'})"
                )

            write_config = WriteConfig(
                include_samples=self.config.include_samples,
                output_format=self.config.output_format,
            )
            records = tqdm(
                reader,
                desc="Decomposing variants",
                unit="variant",
                leave=False,
                disable=not self.config.progress,
            )
            with VCFWriter(
                self.config.output, reader.header, write_config, self.logger
            ) as writer:
                try:
                    writer.write_all(
                        self.engine.run(records, skip_errors=self.config.skip_errors)
                    )
                except DecompositionError as e:
                    self.logger.error(f"Cannot decompose variant: {e}")
                    raise
            samples = reader.samples

        stats = self.engine.stats
        if self.logger.isEnabledFor(logging.INFO):
            self.logger.info(
                f"Done: {stats.records_read} variants read, "
                f"{stats.records_split} multi-allelic split into "
                f"{stats.splits_emitted}, {stats.records_written} written"
            )

        if self.config.write_index:
            index_output(Path(self.config.output), self.config.output_format, self.logger)

        if self.config.summary_path is not None:
            path = self.summary_writer.write_summary(stats, self.config.summary_path)
            if self.logger.isEnabledFor(logging.INFO):
                self.logger.info(f"Summary TSV written: {path}")

        self.memory_monitor.check_memory_and_warn("processing complete")

        if self.config.run_info_dir is not None:
            path = self.run_info_writer.write_run_info(
                self.config.run_info_dir, stats, samples, self._config_data()
            )
            if self.logger.isEnabledFor(logging.INFO):
                self.logger.info(f"Run information written: {path}")

        return stats

    def _config_data(self) -> dict:
        return {
            "input_vcf": self.config.input_vcf,
            "output": self.config.output,
            "output_format": self.config.output_format,
            "include_samples": self.config.include_samples,
            "arity_mismatch_policy": self.config.arity_mismatch_policy.value,
            "skip_errors": self.config.skip_errors,
            "log_level": self.config.log_level,
            "log_format": self.config.log_format,
        }
