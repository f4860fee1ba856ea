"""Location model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from integrity.models.base import Base

if TYPE_CHECKING:
    from integrity.models.file_path import FilePath


class Location(Base):
    """A registered root directory whose contents are tracked in the catalog."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pub_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Nullable so that a half-registered location is detectable at job init.
    path: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    file_paths: Mapped[list[FilePath]] = relationship(
        back_populates="location", cascade="all, delete-orphan"
    )
