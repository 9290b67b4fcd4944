# src/tokencount/core/aggregator.py
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from tokencount.config import ConfigurationError
from tokencount.core.processor import process_file
from tokencount.models import FileStat, ProcessResult, Summary, TooLarge
from tokencount.utils.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def resolve_worker_count(threads: Optional[int]) -> int:
    # 0 means "use the default parallelism"
    if threads is None or threads == 0:
        return os.cpu_count() or 1
    if threads < 0:
        raise ConfigurationError(f"invalid worker-pool configuration: threads={threads}")
    return threads


def _keep(result: ProcessResult) -> Optional[FileStat]:
    if isinstance(result, FileStat):
        return result
    if isinstance(result, TooLarge):
        logger.info(result.message)
    else:
        logger.warning(result.message)
    return None


def aggregate(
    candidates: Iterable,
    tokenizer: Tokenizer,
    max_bytes: Optional[int] = None,
    threads: Optional[int] = None,
) -> List[FileStat]:
    """
    Processes every candidate on a thread pool and keeps the successes.

    Failures are logged (oversized files at INFO, the rest at WARNING) and
    dropped; they never abort the run.
    """
    workers = resolve_worker_count(threads)
    candidates = list(candidates)
    if not candidates:
        return []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = executor.map(lambda p: process_file(p, max_bytes, tokenizer), candidates)
        stats = [stat for stat in map(_keep, results) if stat is not None]

    logger.debug("tokenized %d of %d files", len(stats), len(candidates))
    return stats


# --- Summary statistics ---

def percentile(sorted_counts: Sequence[int], p: float) -> int:
    """Nearest-rank percentile over an ascending sequence. 0 when empty."""
    n = len(sorted_counts)
    if n == 0:
        return 0
    rank = min(max(math.ceil(p * n), 1), n)
    return sorted_counts[rank - 1]


def by_tokens_desc(stat: FileStat):
    return (-stat.tokens, stat.path)


def select_top(stats: Iterable[FileStat], n: int) -> List[FileStat]:
    """The n largest files by tokens, ties broken by ascending path."""
    return sorted(stats, key=by_tokens_desc)[:n]


def build_summary(stats: Sequence[FileStat], top: Optional[int] = None) -> Summary:
    counts = sorted(s.tokens for s in stats)
    files = len(counts)
    total = sum(counts)
    return Summary(
        files=files,
        total=total,
        average=total / files if files else 0.0,
        p50=percentile(counts, 0.50),
        p90=percentile(counts, 0.90),
        p99=percentile(counts, 0.99),
        top=select_top(stats, top) if top is not None else None,
    )
