"""Directory scanning: turn a root directory into a name -> path mapping.

Naming rules:
- Nested segments relative to the root are joined with ``.``.
- Any segment starting with ``..`` hides itself and everything below it.
  Kubernetes volume mounts keep real files under ``..data``-style directories
  and expose them through visible symlinks, which are kept.
- Symbolic links are followed; directories are traversed, never selected.
  A link back to a directory on the current branch is a loop and fails the
  scan.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Final

from configtree.errors import RootNotADirectoryError, SourceUnreadableError

if TYPE_CHECKING:
    from configtree.options import OptionSet

log = logging.getLogger(__name__)

MAX_DEPTH: Final[int] = 100
HIDDEN_MARKER: Final[str] = ".."


def is_hidden(name: str) -> bool:
    """Return True if a single path segment carries the hidden marker."""
    return name.startswith(HIDDEN_MARKER)


def has_hidden_segment(relative: Path) -> bool:
    return any(is_hidden(part) for part in relative.parts)


def flatten_name(relative: Path) -> str:
    """Join the segments of a root-relative path with dots."""
    return ".".join(relative.parts)


def check_root(root: Path) -> bool:
    """Return True if *root* is an existing directory.

    Returns False for a missing root.

    Raises:
        RootNotADirectoryError: If *root* exists but is not a directory.
    """
    if not root.exists():
        return False
    if not root.is_dir():
        raise RootNotADirectoryError(root)
    return True


def _is_value_entry(path: Path) -> bool:
    # Dangling symlinks are kept: they fail on read, not on scan.
    return path.is_symlink() or path.is_file()


def _dir_key(path: str, root: Path) -> tuple[int, int]:
    try:
        st = os.stat(path)
    except OSError as exc:
        raise SourceUnreadableError(root, exc.strerror) from exc
    return st.st_dev, st.st_ino


def scan_tree(root: str | Path, options: OptionSet) -> dict[str, Path]:
    """Recursively map flattened names to file paths under *root*.

    The result is sorted by name. A missing root yields an empty mapping.

    Raises:
        RootNotADirectoryError: If *root* exists but is not a directory.
        SourceUnreadableError: If listing a directory fails or a symbolic
            link leads back to a directory on the current branch.
    """
    root_path = Path(root)
    if not check_root(root_path):
        log.debug("Config tree root %s does not exist; nothing to scan", root_path)
        return {}

    found: dict[str, Path] = {}
    # Directory identities from the root down to each queued directory.
    top = os.fspath(root_path)
    branches: dict[str, frozenset[tuple[int, int]]] = {
        top: frozenset({_dir_key(top, root_path)})
    }

    def _on_error(exc: OSError) -> None:
        raise SourceUnreadableError(root_path, exc.strerror) from exc

    for current, dirnames, filenames in os.walk(
        root_path, onerror=_on_error, followlinks=True
    ):
        ancestors = branches.pop(current)
        relative_dir = Path(current).relative_to(root_path)
        depth = len(relative_dir.parts)
        kept_dirs = []
        for d in sorted(dirnames):
            if is_hidden(d):
                log.debug("Skipping hidden directory %s", Path(current) / d)
                continue
            if depth + 1 >= MAX_DEPTH:
                continue
            child = os.path.join(current, d)
            key = _dir_key(child, root_path)
            if key in ancestors:
                raise SourceUnreadableError(
                    root_path, f"symbolic link loop at '{child}'"
                )
            branches[child] = ancestors | {key}
            kept_dirs.append(d)
        dirnames[:] = kept_dirs

        for fname in sorted(filenames):
            relative = relative_dir / fname
            if has_hidden_segment(relative):
                continue
            path = Path(current) / fname
            if not _is_value_entry(path):
                continue
            found[options.fold(flatten_name(relative))] = path

    log.debug("Scanned config tree %s: %d entries", root_path, len(found))
    return dict(sorted(found.items()))


def list_entries(directory: str | Path, options: OptionSet) -> dict[str, Path]:
    """Map names to the non-directory, non-hidden entries of *directory*.

    Only the immediate children are listed. Symlinks are followed to decide
    whether an entry is a directory.

    Raises:
        SourceUnreadableError: If listing the directory fails.
    """
    dir_path = Path(directory)
    try:
        children = sorted(dir_path.iterdir())
    except OSError as exc:
        raise SourceUnreadableError(dir_path, exc.strerror) from exc

    found: dict[str, Path] = {}
    for child in children:
        if is_hidden(child.name):
            log.debug("Skipping hidden entry %s", child)
            continue
        if child.is_dir():
            continue
        found[options.fold(child.name)] = child
    return found


def list_subdirectories(directory: str | Path) -> list[Path]:
    """Return the non-hidden subdirectories of *directory*, sorted by name.

    Entries that are not directories are skipped and logged.

    Raises:
        SourceUnreadableError: If listing the directory fails.
    """
    dir_path = Path(directory)
    try:
        children = sorted(dir_path.iterdir())
    except OSError as exc:
        raise SourceUnreadableError(dir_path, exc.strerror) from exc

    out: list[Path] = []
    for child in children:
        if is_hidden(child.name):
            log.debug("Skipping hidden entry %s", child)
        elif not child.is_dir():
            log.debug("Skipping non-directory entry %s", child)
        else:
            out.append(child)
    return out
