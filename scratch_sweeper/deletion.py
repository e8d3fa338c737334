"""
Best-effort removal of subtrees already judged removable.

Children are removed before their parent. Symbolic links are unlinked, never
followed, and the walk never enters a directory on another device.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
from pathlib import Path

DeletionErrors = list[tuple[Path, OSError]]


class PathOutsideRootError(ValueError):
    """Raised when a deletion target is not inside the scratch root."""


def _record(errors: DeletionErrors, path: Path, exc: OSError) -> None:
    logging.error("Failed to delete %s: %s", path, exc)
    errors.append((path, exc))


def _ensure_inside(path: Path, root: Path) -> None:
    # Resolve the parent only, so a symlinked candidate is judged by where
    # the link itself lives.
    location = path.parent.resolve() / path.name
    try:
        location.relative_to(root.resolve())
    except ValueError:
        raise PathOutsideRootError(f"{location} escapes root {root}") from None
    if location == root.resolve():
        raise PathOutsideRootError(f"Refusing to delete the root itself: {root}")


def _ensure_writable(path: Path, st: os.stat_result) -> None:
    # Unlinking needs a writable file on some platforms and a writable,
    # searchable parent directory everywhere.
    if stat.S_ISLNK(st.st_mode):
        return
    required = stat.S_IRWXU if stat.S_ISDIR(st.st_mode) else stat.S_IWRITE
    if st.st_mode & required == required:
        return
    try:
        os.chmod(path, stat.S_IMODE(st.st_mode) | required)
    except OSError as exc:
        logging.debug("Could not make %s writable: %s", path, exc)


def _remove_file(path: Path, st: os.stat_result, errors: DeletionErrors) -> None:
    _ensure_writable(path, st)
    try:
        os.unlink(path)
    except OSError as exc:
        _record(errors, path, exc)
    else:
        logging.debug("Deleted %s", path)


def _remove_dir(path: Path, st: os.stat_result, errors: DeletionErrors) -> None:
    device = st.st_dev
    # (directory, stat, children_done); a directory is pushed back above its
    # subdirectories so it is removed only after them.
    pending = [(path, st, False)]
    while pending:
        current, current_st, children_done = pending.pop()
        if children_done:
            try:
                os.rmdir(current)
            except OSError as exc:
                _record(errors, current, exc)
            else:
                logging.debug("Removed directory %s", current)
            continue

        _ensure_writable(current, current_st)
        try:
            with os.scandir(current) as it:
                children = list(it)
        except OSError as exc:
            _record(errors, current, exc)
            continue

        pending.append((current, current_st, True))
        for child in children:
            child_path = Path(child.path)
            try:
                child_st = child.stat(follow_symlinks=False)
            except OSError as exc:
                _record(errors, child_path, exc)
                continue
            if not stat.S_ISDIR(child_st.st_mode):
                _remove_file(child_path, child_st, errors)
            elif child_st.st_dev != device:
                _record(
                    errors,
                    child_path,
                    OSError(errno.EXDEV, "refusing to cross filesystem boundary", str(child_path)),
                )
            else:
                pending.append((child_path, child_st, False))


def delete_tree(path: Path | str, *, root: Path | None = None) -> DeletionErrors:
    """Delete ``path`` and everything beneath it, returning (path, error) for failures.

    Raises:
        PathOutsideRootError: If ``root`` is given and ``path`` is not inside it.
    """
    path = Path(path)
    if root is not None:
        _ensure_inside(path, Path(root))

    errors: DeletionErrors = []
    try:
        st = os.lstat(path)
    except OSError as exc:
        _record(errors, path, exc)
        return errors

    if stat.S_ISDIR(st.st_mode):
        _remove_dir(path, st, errors)
    else:
        _remove_file(path, st, errors)
    if not errors:
        logging.info("Deleted %s", path)
    return errors
