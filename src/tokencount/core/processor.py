# src/tokencount/core/processor.py
import os
from pathlib import Path
from typing import Optional

from tokencount.models import FileStat, MetadataUnavailable, ProcessResult, ReadFailed, TooLarge
from tokencount.utils.tokenizer import Tokenizer


def normalize_display_path(path: Path) -> str:
    """Path relative to the working directory when possible, else as given."""
    path = Path(path)
    if path.is_absolute():
        try:
            path = path.relative_to(Path.cwd())
        except ValueError:
            return path.as_posix()
    display = path.as_posix()
    return "." if display in ("", ".") else display


def process_file(path: Path, max_bytes: Optional[int], tokenizer: Tokenizer) -> ProcessResult:
    """
    Reads one file whole and counts its tokens.

    Returns a FileStat on success, otherwise one of the ProcessFailure values.
    Never raises for per-file problems.
    """
    display_path = normalize_display_path(path)

    try:
        size = os.stat(path).st_size
    except OSError as e:
        return MetadataUnavailable(display_path, e.strerror or str(e))

    if max_bytes is not None and size > max_bytes:
        return TooLarge(display_path, size, max_bytes)

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        return ReadFailed(display_path, f"stream did not contain valid UTF-8 ({e.reason})")
    except OSError as e:
        return ReadFailed(display_path, e.strerror or str(e))

    return FileStat(path=display_path, tokens=tokenizer.count(content))
