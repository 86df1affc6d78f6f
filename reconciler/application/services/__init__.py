"""Service orchestrators."""

from .reconcile_service import ReconcileService

__all__ = ["ReconcileService"]
