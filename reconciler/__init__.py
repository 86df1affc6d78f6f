"""
Desired-state reconciliation engine.

Builds a dependency graph from resource definitions, diffs it against the
last-known deployed state and applies the resulting change set through a
provider, persisting state after every successful step.
"""

__version__ = "0.1.0"
