"""TSV summary file output operations."""

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

import numpy as np

from ..core.engine import EngineStats

__all__ = ["SummaryWriter", "alt_count_distribution"]


def alt_count_distribution(alt_counts: Mapping[int, int]) -> List[Tuple[int, int]]:
    """Number of input records per ALT allele count, sorted by ALT count.

    Example:
        >>> alt_count_distribution(Counter({3: 1, 1: 1, 2: 2}))
        [(1, 1), (2, 2), (3, 1)]
        >>> alt_count_distribution(Counter())
        []
    """
    return [(int(n), int(c)) for n, c in sorted(alt_counts.items()) if c > 0]


class SummaryWriter:
    """Handles TSV summary file output."""

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)

    def summarize(self, stats: EngineStats) -> Dict[str, float]:
        """Flatten run statistics into ``metric -> value``.

        Example:
            >>> stats = EngineStats(records_read=2, alt_counts=Counter({1: 1, 3: 1}))
            >>> SummaryWriter().summarize(stats)["mean_alt_alleles"]
            2.0
        """
        summary: Dict[str, float] = dict(stats.as_dict())
        distribution = alt_count_distribution(stats.alt_counts)
        n_alts = np.array([n for n, _ in distribution], dtype=np.int64)
        n_records = np.array([c for _, c in distribution], dtype=np.int64)
        summary["mean_alt_alleles"] = (
            float(np.average(n_alts, weights=n_records)) if n_alts.size else 0.0
        )
        summary["max_alt_alleles"] = int(n_alts.max()) if n_alts.size else 0
        return summary

    def write_summary(self, stats: EngineStats, summary_path: Path) -> Path:
        """Write run statistics and the ALT-count distribution as TSV.

        Args:
            stats: Statistics collected by the engine
            summary_path: Destination file

        Returns:
            Path of the written file

        Example:
            >>> writer = SummaryWriter()
            >>> writer.write_summary(engine.stats, Path("out/summary.tsv"))
            >>> # metric<TAB>value lines, then alt_alleles=N<TAB>records lines
        """
        summary_path = Path(summary_path)
        summary_path.parent.mkdir(parents=True, exist_ok=True)

        lines = ["metric\tvalue"]
        for key, value in self.summarize(stats).items():
            if isinstance(value, float):
                lines.append(f"{key}\t{value:.3f}")
            else:
                lines.append(f"{key}\t{value}")
        for n_alts, n_records in alt_count_distribution(stats.alt_counts):
            lines.append(f"alt_alleles={n_alts}\t{n_records}")

        with open(summary_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(f"Summary written with {len(lines) - 1} rows")
        return summary_path
