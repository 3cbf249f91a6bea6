"""
The store module provides the resolution cache used during a single run.

- Uses AssetKey as the key for all entries.
- Holds the ResultSet of every asset that generated successfully.
- Tracks the generation status of every asset the resolver has started, which
  is what guarantees each asset generates at most once per run.

This abstract interface allows for various implementations (in-memory, etc.).
"""

from .store import Store, StoreEvent, Status, StatusInfo
from .in_memory import InMemoryStore

__all__ = [
    "Store",
    "StoreEvent",
    "InMemoryStore",
    "Status",
    "StatusInfo",
]
