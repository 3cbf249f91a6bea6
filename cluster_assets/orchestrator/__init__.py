"""Orchestrator for cluster-assets.

This module provides the engine of a run: the resolvers that execute the asset
dependency graph, the orchestrator that drives them, and the bundle that holds
the aggregated output.
"""

from .bundle import Bundle, BundleFile, write_bundle
from .orchestrator import Orchestrator, OrchestratorConfig
from .resolver import AsyncResolver, Resolver

__all__ = [
    "Orchestrator",
    "OrchestratorConfig",
    "Resolver",
    "AsyncResolver",
    "Bundle",
    "BundleFile",
    "write_bundle",
]
