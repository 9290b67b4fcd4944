# src/tokencount/core/ignore.py
import logging
from pathlib import Path, PurePath
from typing import Dict, Iterable, List, Optional, Union

import pathspec

from tokencount.config import ConfigurationError

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"

# Relative to the home directory; only the first existing one is read
GLOBAL_IGNORE_CANDIDATES = [
    Path(".config") / "git" / "ignore",
    Path(".gitignore_global"),
]


def compile_patterns(lines: Iterable[str]) -> pathspec.GitIgnoreSpec:
    """
    Compiles gitignore-style lines into a single matcher.
    Raises ConfigurationError on invalid pattern syntax.
    """
    try:
        return pathspec.GitIgnoreSpec.from_lines(list(lines))
    except ValueError as e:
        raise ConfigurationError(f"invalid glob pattern: {e}") from e


def _match_key(rel_path: Union[str, PurePath], is_directory: bool) -> str:
    key = rel_path.as_posix() if isinstance(rel_path, PurePath) else str(rel_path)
    if is_directory and not key.endswith("/"):
        key += "/"
    return key


class PathFilter:
    """Exclude-glob matcher over paths relative to the scan root."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = list(patterns)
        self._spec = compile_patterns(self.patterns)

    def matches(self, rel_path: Union[str, PurePath], is_directory: bool = False) -> bool:
        return self._spec.match_file(_match_key(rel_path, is_directory))


def read_ignore_lines(ignore_file: Path) -> List[str]:
    """Reads an ignore file; an unreadable one is logged and treated as empty."""
    try:
        return ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        logger.warning("could not read %s: %s", ignore_file, e)
        return []


def read_base_ignore(root: Path, home: Optional[Path] = None) -> List[str]:
    """
    Patterns that apply to the whole tree, independent of any .gitignore:
    1. <root>/.git/info/exclude
    2. The global ignore file (~/.config/git/ignore or ~/.gitignore_global)
    """
    lines: List[str] = []

    exclude_file = root / ".git" / "info" / "exclude"
    if exclude_file.is_file():
        lines.extend(read_ignore_lines(exclude_file))

    home = home if home is not None else Path.home()
    for candidate in GLOBAL_IGNORE_CANDIDATES:
        global_file = home / candidate
        if global_file.is_file():
            lines.extend(read_ignore_lines(global_file))
            break

    return lines


class GitIgnoreRules:
    """
    Per-directory .gitignore rules for one scan root.

    Each visited directory registers its own .gitignore. A path is checked
    against the closest directory first; the first spec with a decisive
    match (ignore or negation) wins, then the base patterns are consulted.
    """

    def __init__(self, root: Path, home: Optional[Path] = None):
        self.root = root
        self._specs: Dict[str, pathspec.GitIgnoreSpec] = {}
        self._base = self._compile(read_base_ignore(root, home), root / ".git" / "info")

    def _compile(self, lines: List[str], source: Path) -> Optional[pathspec.GitIgnoreSpec]:
        if not any(line.strip() for line in lines):
            return None
        try:
            return compile_patterns(lines)
        except ConfigurationError as e:
            logger.warning("ignoring rules from %s: %s", source, e)
            return None

    def load_dir(self, rel_dir: str, abs_dir: Path) -> None:
        """Registers <abs_dir>/.gitignore, if present, for paths under rel_dir."""
        ignore_file = abs_dir / GITIGNORE_NAME
        if not ignore_file.is_file():
            return
        spec = self._compile(read_ignore_lines(ignore_file), ignore_file)
        if spec is not None:
            self._specs[rel_dir] = spec

    def is_ignored(self, rel_path: Union[str, PurePath], is_directory: bool = False) -> bool:
        key = _match_key(rel_path, False)
        parts = key.split("/")

        for depth in range(len(parts) - 1, -1, -1):
            spec = self._specs.get("/".join(parts[:depth]))
            if spec is None:
                continue
            sub_path = _match_key("/".join(parts[depth:]), is_directory)
            result = spec.check_file(sub_path)
            if result.include is not None:
                return result.include

        if self._base is not None:
            result = self._base.check_file(_match_key(key, is_directory))
            if result.include is not None:
                return result.include

        return False
