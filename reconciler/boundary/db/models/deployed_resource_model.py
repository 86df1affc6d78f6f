"""
Deployed resource ORM model.

One row per logical id holding the last successfully applied description
of that resource.

Dependencies: sqlalchemy, reconciler.boundary.db.base
System role: Persistent row behind StateSnapshot.resources
"""

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from reconciler.boundary.db.base import Base, TimestampMixin


class DeployedResourceModel(Base, TimestampMixin):
    """
    Deployed resource ORM model.

    Values are stored loosely typed (kind as plain string, JSON columns) and
    validated into DeployedResource on load, so a damaged row surfaces as a
    corrupt-state error instead of an ORM failure.

    Attributes:
        logical_id: Stable identifier from the definition set (primary key)
        physical_id: Identifier assigned by the provider
        kind: Resource kind value
        properties: Declared properties as last applied (references unresolved)
        outputs: Final property values returned by the provider
        dependencies: Logical ids referenced when the resource was applied
        removal_policy: destroy | retain
        sequence: Insertion order, kept across updates
    """

    __tablename__ = "deployed_resources"

    logical_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    physical_id: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(64), nullable=False)
    properties: Mapped[Any] = mapped_column(JSON, nullable=False, default=dict)
    outputs: Mapped[Any] = mapped_column(JSON, nullable=False, default=dict)
    dependencies: Mapped[Any] = mapped_column(JSON, nullable=False, default=list)
    removal_policy: Mapped[str] = mapped_column(String(16), nullable=False, default="destroy")
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    def __repr__(self) -> str:
        return (
            f"<DeployedResourceModel(logical_id={self.logical_id}, "
            f"kind={self.kind}, physical_id={self.physical_id})>"
        )
