# src/tokencount/core/report.py
import json
from typing import List, Optional, Sequence

from tokencount.core.aggregator import by_tokens_desc, select_top
from tokencount.models import FileStat, Summary

FORMATS = ("table", "json", "ndjson")
SORT_KEYS = ("path", "tokens")


def order_stats(stats: Sequence[FileStat], sort: str) -> List[FileStat]:
    """Path ascending, or tokens descending with ties by ascending path."""
    if sort == "tokens":
        return sorted(stats, key=by_tokens_desc)
    return sorted(stats, key=lambda s: s.path)


def display_stats(stats: Sequence[FileStat], sort: str, top: Optional[int] = None) -> List[FileStat]:
    """
    Rows to print. With a top-N limit the selection is always by tokens;
    only the display order follows the sort key.
    """
    if top is not None:
        stats = select_top(stats, top)
    return order_stats(stats, sort)


def render_table(stats: Sequence[FileStat], summary: Summary) -> str:
    width = max((len(str(s.tokens)) for s in stats), default=1)

    lines = [f"{s.tokens:>{width}}  {s.path}" for s in stats]
    lines.append("")
    lines.append("---")
    lines.append(f"total files: {summary.files}")
    lines.append(f"total tokens: {summary.total}")
    lines.append(f"average/file: {summary.average:.2f}")
    lines.append(f"p50: {summary.p50}")
    lines.append(f"p90: {summary.p90}")
    lines.append(f"p99: {summary.p99}")
    if summary.top is not None:
        lines.append("top files:")
        for s in summary.top:
            lines.append(f"  {s.path} ({s.tokens})")
    return "\n".join(lines) + "\n"


def render_json(stats: Sequence[FileStat], summary: Summary) -> str:
    rows = [s.to_dict() for s in stats]
    rows.append({"summary": summary.to_dict()})
    return json.dumps(rows, indent=2, ensure_ascii=False) + "\n"


def render_ndjson(stats: Sequence[FileStat], summary: Summary, with_summary: bool = True) -> str:
    lines = [json.dumps(s.to_dict(), separators=(",", ":"), ensure_ascii=False) for s in stats]
    if with_summary:
        lines.append(json.dumps({"summary": summary.to_dict()}, separators=(",", ":"), ensure_ascii=False))
    return "".join(line + "\n" for line in lines)


def render(stats: Sequence[FileStat], summary: Summary, fmt: str = "table", with_summary: bool = True) -> str:
    if fmt == "table":
        return render_table(stats, summary)
    if fmt == "json":
        return render_json(stats, summary)
    if fmt == "ndjson":
        return render_ndjson(stats, summary, with_summary)
    raise ValueError(f"unknown output format: {fmt}")
