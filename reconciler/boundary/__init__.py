"""
Boundary layer for external system integrations.

Handles all interactions with external systems (state database, cloud
provider). Provides adapters behind the contracts the executor depends on.
"""
