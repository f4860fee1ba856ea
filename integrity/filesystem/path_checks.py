"""Sub-path validation against a location root."""

from __future__ import annotations

from pathlib import Path

from integrity.exceptions import (
    SubPathNotADirectoryError,
    SubPathNotFoundError,
    SubPathOutsideLocationError,
)


def is_root_sub_path(sub_path: Path) -> bool:
    """Return True for the sub paths that mean "the whole location"."""
    return sub_path in (Path(""), Path("/"))


def normalize_sub_path(location_path: Path | None, sub_path: Path | None) -> Path | None:
    """Express a sub path relative to the location root.

    An absolute path inside the location is made relative to it; any other
    leading slash is dropped. Returns None for the root itself.
    """
    if sub_path is None or is_root_sub_path(sub_path):
        return None
    if (
        location_path is not None
        and sub_path.is_absolute()
        and sub_path.is_relative_to(location_path)
    ):
        relative = sub_path.relative_to(location_path)
    else:
        relative = Path(str(sub_path).lstrip("/"))
    if is_root_sub_path(relative):
        return None
    return relative


def ensure_sub_path_is_in_location(location_path: Path, sub_path: Path) -> Path:
    """Resolve ``sub_path`` against the location root.

    An absolute ``sub_path`` already under the location is used as is; any
    other leading slash is treated as relative to the root. Returns the
    resolved absolute path, which is strictly inside the root.
    """
    root = location_path.resolve()
    if sub_path.is_absolute() and sub_path.is_relative_to(location_path):
        candidate = sub_path
    else:
        candidate = location_path / str(sub_path).lstrip("/")

    full_path = candidate.resolve()
    if full_path == root or not full_path.is_relative_to(root):
        raise SubPathOutsideLocationError(location_path, sub_path)
    if not full_path.exists():
        raise SubPathNotFoundError(sub_path)
    return full_path


def ensure_sub_path_is_directory(full_path: Path, sub_path: Path) -> None:
    """Raise SubPathNotADirectoryError unless ``full_path`` is a directory."""
    if not full_path.is_dir():
        raise SubPathNotADirectoryError(sub_path)
