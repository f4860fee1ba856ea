"""Location-relative path decomposition for catalog entries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def split_name_extension(file_name: str) -> tuple[str, str]:
    """Split a file name into (stem, extension) without the leading dot.

    Dotfiles such as ``.bashrc`` have no extension.
    """
    pure = PurePosixPath(file_name)
    suffix = pure.suffix
    if not suffix:
        return file_name, ""
    return file_name[: -len(suffix)], suffix[1:]


@dataclass(frozen=True)
class IsolatedFilePath:
    """A path inside a location, stored the way the catalog stores it.

    ``materialized_path`` is the parent directory with leading and trailing
    slashes; ``name`` excludes the extension for files.
    """

    location_id: int
    materialized_path: str
    name: str
    extension: str
    is_dir: bool

    @classmethod
    def from_relative(cls, location_id: int, rel_path: str, *, is_dir: bool) -> IsolatedFilePath:
        """Build from a ``/``-separated path relative to the location root."""
        parts = [part for part in rel_path.split("/") if part]
        if not parts:
            msg = "The location root has no isolated file path"
            raise ValueError(msg)
        if any(part in (".", "..") for part in parts):
            msg = f"Relative path must not contain '.' or '..' components: {rel_path}"
            raise ValueError(msg)

        materialized_path = "/" + "".join(f"{part}/" for part in parts[:-1])
        if is_dir:
            name, extension = parts[-1], ""
        else:
            name, extension = split_name_extension(parts[-1])
        return cls(
            location_id=location_id,
            materialized_path=materialized_path,
            name=name,
            extension=extension,
            is_dir=is_dir,
        )

    @classmethod
    def from_full_path(
        cls, location_id: int, location_path: Path, full_path: Path, *, is_dir: bool
    ) -> IsolatedFilePath:
        """Build from an absolute path under ``location_path``.

        Raises ValueError if ``full_path`` is not inside the location.
        """
        rel = full_path.relative_to(location_path)
        return cls.from_relative(location_id, rel.as_posix(), is_dir=is_dir)

    @property
    def full_name(self) -> str:
        if self.extension:
            return f"{self.name}.{self.extension}"
        return self.name

    def materialized_path_for_children(self) -> str | None:
        """Prefix shared by the materialized paths of every descendant."""
        if not self.is_dir:
            return None
        return f"{self.materialized_path}{self.name}/"

    def relative_path(self) -> PurePosixPath:
        """Path relative to the location root."""
        return PurePosixPath(self.materialized_path.lstrip("/")) / self.full_name
