"""Path containment checks that follow symlinks to their real target."""

import os
from pathlib import Path

from codeloop.security.domain.errors import PathEscapeError


def validate_path(path: str | Path, root: str | Path) -> bool:
    """Return True if path resolves to root itself or to a descendant of root.

    Relative paths are interpreted against root. Resolution is done on the real
    filesystem, so a symlink inside root that points outside of it is rejected.
    """
    try:
        resolve_within_root(path=path, root=root)
    except PathEscapeError:
        return False
    return True


def resolve_within_root(path: str | Path, root: str | Path) -> Path:
    """Return the canonical real path of path, or raise if it escapes root.

    Existing components are resolved through symlinks; for a path that does not
    exist yet the deepest existing ancestor is resolved and the remaining
    components are appended to it, so a not-yet-created file below a symlinked
    directory is still judged by where that directory really lives.

    Raises:
        PathEscapeError: if the resolved path is outside root or cannot be
            resolved at all.
    """
    try:
        canonical_root = _canonical(Path(root))
        canonical_path = _canonical(Path(root) / path)
    except (OSError, ValueError) as exc:
        raise PathEscapeError(path=str(path), root=str(root)) from exc

    # Path.is_relative_to compares whole components, so /a/bc is not inside /a/b.
    if canonical_path == canonical_root or canonical_path.is_relative_to(
        canonical_root
    ):
        return canonical_path

    raise PathEscapeError(path=str(path), root=str(root))


def _canonical(path: Path) -> Path:
    absolute = Path(os.path.abspath(path)) if not path.is_absolute() else path
    existing = absolute
    missing: list[str] = []
    while not os.path.lexists(existing) and existing != existing.parent:
        missing.insert(0, existing.name)
        existing = existing.parent
    real = Path(os.path.realpath(existing))
    if not missing:
        return real
    # The missing tail holds no symlinks, so collapsing ".." lexically is exact.
    return Path(os.path.normpath(real.joinpath(*missing)))
