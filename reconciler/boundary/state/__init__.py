"""
Deployed state persistence.

Exports:
  - StateStore: Contract used by the executor and service
  - SqlStateStore: SQLAlchemy-backed implementation
"""

from reconciler.boundary.state.sql_state_store import SqlStateStore
from reconciler.boundary.state.state_store import StateStore

__all__ = ["SqlStateStore", "StateStore"]
