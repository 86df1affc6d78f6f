"""
State serial ORM model.

Single-row table holding the snapshot version. Bumped in the same
transaction as every resource write.

Dependencies: sqlalchemy, reconciler.boundary.db.base
System role: Monotonic StateSnapshot.version
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from reconciler.boundary.db.base import Base, TimestampMixin

STATE_SERIAL_ROW_ID = 1


class StateSerialModel(Base, TimestampMixin):
    """Snapshot version counter (always one row, id=1)."""

    __tablename__ = "state_serial"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=STATE_SERIAL_ROW_ID)
    serial: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<StateSerialModel(serial={self.serial})>"
