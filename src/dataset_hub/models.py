from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db.base import Base, CreatedAtMixin


class Teammate(Base):
    """
    A named uploader.

    Rows come from the configured seed list and are never changed afterwards.
    `position` keeps the seed order so listings and stats are stable.
    """

    __tablename__ = "teammates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    # Plaintext, compared through security.passcodes.verify_passcode only.
    passcode: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    datasets: Mapped[list["Dataset"]] = relationship(back_populates="uploaded_by")

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<Teammate at {hex(id(self))}>"
        return f"<Teammate(id={self.id}, name={self.name!r})>"


class Dataset(CreatedAtMixin, Base):
    """One instruction/input/output training record."""

    __tablename__ = "datasets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    input: Mapped[str] = mapped_column(Text, nullable=False)
    output: Mapped[str] = mapped_column(Text, nullable=False)
    teammate_id: Mapped[int] = mapped_column(
        ForeignKey("teammates.id"), nullable=False, index=True
    )

    uploaded_by: Mapped[Teammate] = relationship(back_populates="datasets", lazy="joined")

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<Dataset at {hex(id(self))}>"
        return f"<Dataset(id={self.id}, teammate_id={self.teammate_id})>"
