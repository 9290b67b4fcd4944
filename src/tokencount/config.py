# src/tokencount/config.py
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

DEFAULT_EXTENSIONS = ("elm",)

# Version-control, build-output and dependency-cache directories
DEFAULT_EXCLUDE_PATTERNS = [
    ".git/",
    ".hg/",
    ".svn/",
    "target/",
    "node_modules/",
    "__pycache__/",
    ".venv/",
    "venv/",
    "dist/",
    "build/",
]

# CLI name -> tiktoken encoding name
ENCODINGS = {
    "cl100k-base": "cl100k_base",
    "cl100k_base": "cl100k_base",
    "o200k-base": "o200k_base",
    "o200k_base": "o200k_base",
}
DEFAULT_ENCODING = "cl100k-base"


class ConfigurationError(ValueError):
    """Fatal setup problem: bad glob, unloadable vocabulary, bad pool size."""


def normalize_extensions(raw: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Lower-cases extensions and strips one leading dot. Falls back to the defaults."""
    exts = set()
    for ext in raw or ():
        ext = ext.strip()
        if ext.startswith("."):
            ext = ext[1:]
        if ext:
            exts.add(ext.lower())
    return frozenset(exts or DEFAULT_EXTENSIONS)


@dataclass(frozen=True)
class ScanOptions:
    """Everything the walker and the aggregator need from the command line."""
    extensions: FrozenSet[str] = frozenset(DEFAULT_EXTENSIONS)
    exclude: Tuple[str, ...] = ()
    respect_gitignore: bool = True
    follow_symlinks: bool = False
    max_bytes: Optional[int] = None
    threads: Optional[int] = None
    exclude_defaults: Tuple[str, ...] = tuple(DEFAULT_EXCLUDE_PATTERNS)

    @property
    def exclude_patterns(self) -> List[str]:
        # Later patterns win; user patterns come last
        return list(self.exclude_defaults) + list(self.exclude)
