import logging
import os
from typing import Iterable, List

logger = logging.getLogger(__name__)

# Always skipped, on top of whatever the caller ignores.
DEFAULT_IGNORE_DIRS = frozenset({".git", ".hg", ".svn", ".bzr"})


def _keep_dir(name: str, ignore_dirs: frozenset) -> bool:
    return name not in ignore_dirs and name not in DEFAULT_IGNORE_DIRS and not name.startswith(".")


def enumerate_files(root: str, follow_symlinks: bool = False, ignore_dirs: Iterable[str] = ()) -> List[str]:
    """
    Lists the regular files beneath `root`.

    Args:
        root: Directory to walk. Returned paths are joined onto it as given,
            so a root of "." yields "./name".
        follow_symlinks: Descend into symlinked directories and include
            symlinked files. Each real directory is visited once.
        ignore_dirs: Directory names to skip wherever they appear.

    Returns:
        File paths, sorted within each directory.
    """
    ignored = frozenset(name for name in ignore_dirs if name)
    files = []
    visited = set()

    def on_error(error: OSError):
        logger.debug("Skipping unreadable directory %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks, onerror=on_error):
        if follow_symlinks:
            real = os.path.realpath(dirpath)
            if real in visited:
                dirnames[:] = []
                continue
            visited.add(real)

        dirnames[:] = sorted(d for d in dirnames if _keep_dir(d, ignored))
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if os.path.islink(path) and not follow_symlinks:
                continue
            if not os.path.isfile(path):
                continue
            files.append(path)
    return files
