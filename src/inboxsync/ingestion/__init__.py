"""Ingestion layer.

Everything that enters a store (reloads, push deliveries, collaborator
return values) passes through this package before it becomes typed state.
"""

__all__: list[str] = []
