"""
cluster-assets generates the configuration files of a cluster installation
from a validated install config.

Every generated file is produced by an asset. Assets declare the assets they
depend on, and the engine resolves the dependency graph so that each asset
generates exactly once per run with the results of its dependencies in hand.
"""

__all__ = [
    "asset",
    "orchestrator",
    "store",
    "manifest",
    "installconfig",
    "network_operator",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
