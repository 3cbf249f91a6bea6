"""
The asset module defines the contract between the dependency engine and the
producers that plug into it.

- An Asset declares the assets it depends on and generates a ResultSet from
  their results.
- A ResultSet is the ordered, immutable collection of named Content payloads
  produced by one asset.
- The AssetGraph records the dependencies reachable from a set of targets and
  rejects cycles before anything is generated.
"""

from .asset import Asset, AssetKey, Dependencies
from .content import Content, ResultSet
from .graph import AssetGraph

__all__ = [
    "Asset",
    "AssetKey",
    "Dependencies",
    "Content",
    "ResultSet",
    "AssetGraph",
]
