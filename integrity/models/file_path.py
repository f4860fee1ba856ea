"""File path catalog model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from integrity.models.base import Base

if TYPE_CHECKING:
    from integrity.models.location import Location


class FilePath(Base):
    """A tracked filesystem entry inside a location.

    ``materialized_path`` is the parent directory relative to the location
    root, always with leading and trailing slashes (``/`` for the root itself).
    """

    __tablename__ = "file_paths"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pub_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    location_id: Mapped[int] = mapped_column(
        ForeignKey("locations.id", ondelete="CASCADE"), nullable=False
    )
    materialized_path: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    extension: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_dir: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    integrity_checksum: Mapped[str | None] = mapped_column(String(64), nullable=True)
    date_indexed: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    location: Mapped[Location] = relationship(back_populates="file_paths")

    __table_args__ = (
        UniqueConstraint(
            "location_id",
            "materialized_path",
            "name",
            "extension",
            name="uq_file_paths_location_path",
        ),
        Index("idx_file_paths_location_checksum", "location_id", "integrity_checksum"),
        Index("idx_file_paths_materialized_path", "materialized_path"),
    )
