"""Run information file output operations."""

import datetime
import platform
import subprocess
from pathlib import Path
from typing import List

from ..core.engine import EngineStats
from ..utils.memory_monitor import MemoryMonitor
from ..version import __version__ as vcfmulti2one_version

__all__ = ["RunInfoWriter"]


def _git_commit() -> str:
    try:
        return (
            subprocess.run(
                ["git", "rev-parse", "--short", "HEAD"],
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            ).stdout.strip()
            or "unknown"
        )
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


class RunInfoWriter:
    """Handles run information file output."""

    def __init__(self, memory_monitor: MemoryMonitor):
        """Initialize run info writer with memory monitor.

        Args:
            memory_monitor: MemoryMonitor instance for tracking memory usage

        Example:
            >>> from vcfmulti2one.utils.memory_monitor import MemoryMonitor
            >>> from vcfmulti2one.utils.logging_setup import setup_logger
            >>> logger = setup_logger("test")
            >>> monitor = MemoryMonitor(logger)
            >>> writer = RunInfoWriter(monitor)
        """
        self.memory_monitor = memory_monitor

    def write_run_info(
        self,
        output_dir: Path,
        stats: EngineStats,
        samples: List[str],
        config_data: dict,
    ) -> Path:
        """Write run information to ``output_dir/run_info.txt``.

        Args:
            output_dir: Directory receiving run_info.txt (created if absent)
            stats: Statistics collected by the engine
            samples: Sample names of the input header
            config_data: Dictionary containing configuration information

        Example:
            >>> writer = RunInfoWriter(memory_monitor)
            >>> config = {"input_vcf": "in.vcf", "output": "out.vcf", ...}
            >>> writer.write_run_info(Path("out"), engine.stats, samples, config)
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        run_info_path = output_dir / "run_info.txt"

        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        memory_summary = self.memory_monitor.get_memory_summary()

        lines = [
            "vcfmulti2one Run Information",
            "============================",
            "",
            f"Version: {vcfmulti2one_version}",
            f"Git commit: {_git_commit()}",
            f"Python version: {platform.python_version()}",
            f"Platform: {platform.platform()}",
            "",
            f"Run timestamp: {timestamp}",
            "",
            "System Memory Information:",
            f"  Current process memory: {memory_summary['current_mb']:.1f} MB",
            f"  Peak process memory: {memory_summary['peak_mb']:.1f} MB",
            f"  Available system memory: {memory_summary['available_mb']:.1f} MB",
            f"  Total system memory: {memory_summary['total_mb']:.1f} MB",
            "",
            "Input Configuration:",
            f"  Input VCF: {config_data['input_vcf']}",
            f"  Output: {config_data['output']}",
            f"  Output format: {config_data['output_format']}",
            f"  Include samples: {config_data['include_samples']}",
            f"  Arity mismatch policy: {config_data['arity_mismatch_policy']}",
            f"  Skip failing variants: {config_data['skip_errors']}",
            f"  Log level: {config_data['log_level'] or 'default'}",
            f"  Log format: {config_data['log_format']}",
            "",
            "Input Data Summary:",
            f"  Number of samples: {len(samples)}",
            f"  Variants read: {stats.records_read}",
            f"  Multi-allelic variants: {stats.records_split}",
            f"  Variants without ALT: {stats.records_without_alt}",
            f"  Variants skipped on error: {stats.records_failed}",
            "",
            "Output Summary:",
            f"  Variants written: {stats.records_written}",
            f"  Split records: {stats.splits_emitted}",
            f"  Converted genotypes: {stats.genotypes_converted}",
            f"  Dropped INFO attributes: {stats.fields_dropped}",
        ]

        with open(run_info_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

        return run_info_path
