# src/tokencount/core/scanner.py
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from tokencount.config import ScanOptions
from tokencount.core.ignore import GitIgnoreRules, PathFilter

logger = logging.getLogger(__name__)


class ProjectScanner:
    """
    Walks one root and yields candidate file paths.

    Directories matched by the exclude filter or by .gitignore rules are
    pruned in place; every surviving file is checked again and must carry
    one of the allowed extensions.
    """

    def __init__(
        self,
        root: Path,
        options: ScanOptions,
        path_filter: PathFilter,
        home: Optional[Path] = None,
    ):
        self.root = Path(root)
        self.options = options
        self.path_filter = path_filter
        self.home = home
        self.gitignore: Optional[GitIgnoreRules] = None

    def _has_allowed_extension(self, path: Path) -> bool:
        suffix = path.suffix
        if not suffix:
            return False
        return suffix[1:].lower() in self.options.extensions

    def _is_excluded(self, rel_path: Path, is_directory: bool) -> bool:
        if self.path_filter.matches(rel_path, is_directory=is_directory):
            return True
        if self.gitignore is not None:
            return self.gitignore.is_ignored(rel_path, is_directory=is_directory)
        return False

    def _on_walk_error(self, err: OSError) -> None:
        logger.warning("walk error: %s", err)

    def scan(self) -> Iterator[Path]:
        follow = self.options.follow_symlinks

        # A file given directly as a root is reported on its own
        if self.root.is_file():
            if self.path_filter.matches(self.root.name):
                return
            if self._has_allowed_extension(self.root):
                yield self.root
            return

        if self.options.respect_gitignore:
            self.gitignore = GitIgnoreRules(self.root, home=self.home)

        visited: Set[Tuple[int, int]] = set()

        for dirpath, dirnames, filenames in os.walk(
            self.root, onerror=self._on_walk_error, followlinks=follow
        ):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root)

            if follow:
                try:
                    st = current.stat()
                except OSError as e:
                    logger.warning("walk error: %s", e)
                    dirnames[:] = []
                    continue
                identity = (st.st_dev, st.st_ino)
                if identity in visited:
                    logger.warning("walk error: symlink loop detected at %s", current)
                    dirnames[:] = []
                    continue
                visited.add(identity)

            if self.gitignore is not None:
                rel_key = "" if rel_dir == Path(".") else rel_dir.as_posix()
                self.gitignore.load_dir(rel_key, current)

            # --- 1. Prune directories (in place, os.walk honours the edit) ---
            for d in list(dirnames):
                dir_abs_path = current / d
                if not follow and dir_abs_path.is_symlink():
                    dirnames.remove(d)
                    continue
                if self._is_excluded(rel_dir / d, is_directory=True):
                    logger.debug("excluding directory %s", dir_abs_path)
                    dirnames.remove(d)

            # --- 2. Files ---
            for f in filenames:
                file_abs_path = current / f
                if not follow and file_abs_path.is_symlink():
                    continue
                if self._is_excluded(rel_dir / f, is_directory=False):
                    continue
                if not self._has_allowed_extension(file_abs_path):
                    continue
                # Broken symlinks, sockets and fifos
                if not file_abs_path.is_file():
                    continue
                yield file_abs_path


def discover(
    root: Path,
    options: ScanOptions,
    path_filter: PathFilter,
    home: Optional[Path] = None,
) -> List[Path]:
    """Candidate files under one root. Order is not meaningful."""
    return list(ProjectScanner(root, options, path_filter, home=home).scan())


def discover_all(
    roots: Iterable[Path],
    options: ScanOptions,
    path_filter: PathFilter,
    home: Optional[Path] = None,
) -> List[Path]:
    files: List[Path] = []
    for root in roots:
        files.extend(discover(root, options, path_filter, home=home))
    logger.debug("collected %d candidate files", len(files))
    return files
