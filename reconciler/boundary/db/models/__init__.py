"""
Database models package.

Exports:
  - DeployedResourceModel: One row per deployed logical id
  - StateSerialModel: Snapshot version counter

Dependencies: sqlalchemy, reconciler.boundary.db.base
System role: Database model definitions for deployed state
"""

from reconciler.boundary.db.models.deployed_resource_model import DeployedResourceModel
from reconciler.boundary.db.models.state_serial_model import STATE_SERIAL_ROW_ID, StateSerialModel

__all__ = [
    "DeployedResourceModel",
    "STATE_SERIAL_ROW_ID",
    "StateSerialModel",
]
