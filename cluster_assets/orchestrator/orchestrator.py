"""Orchestrator for cluster-assets.

This module provides the entry point of a run: it resolves a set of target
assets with a single shared resolution cache and aggregates their results into
a Bundle.
"""

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from cluster_assets.asset import Asset, AssetGraph, AssetKey
from cluster_assets.context import get_trace_collector
from cluster_assets.exceptions import AssetException
from cluster_assets.store import InMemoryStore, Store
from cluster_assets.task import task_service_context

from .bundle import Bundle
from .resolver import AsyncResolver, Resolver

_LOGGER = logging.getLogger(__name__)


@dataclass
class OrchestratorConfig:
    """Configuration for the orchestrator.

    Attributes:
        concurrent: Resolve independent branches of the graph concurrently
            when running with `async_generate`.
        include_dependencies: Also add the results of every dependency of the
            targets to the bundle, not only the results of the targets.
    """

    concurrent: bool = False
    include_dependencies: bool = False


class Orchestrator:
    """Orchestrator for generating a set of target assets.

    The orchestrator is responsible for:
    - Validating the dependency graph of all targets before generating anything
    - Resolving every target with one resolution cache, so dependencies shared
      between targets are generated once
    - Aggregating the results into a Bundle and rejecting colliding file names
    """

    def __init__(self, config: OrchestratorConfig | None = None) -> None:
        """Initialize the orchestrator."""
        self.config = config or OrchestratorConfig()

    def generate(self, targets: Sequence[Asset]) -> Bundle:
        """Generate the targets and return their aggregated output.

        Raises:
            AssetException: If the graph is invalid, any asset fails, or two
                assets produce the same file. No bundle is returned in that case.
        """
        targets = _unique(targets)
        _LOGGER.info("Generating %d target assets", len(targets))
        store = InMemoryStore()
        with get_trace_collector() as collector:
            try:
                graph = AssetGraph.build(targets)
                resolver = Resolver(store, graph)
                for target in targets:
                    resolver.resolve(target)
                bundle = self._aggregate(graph, targets, store)
            except AssetException as err:
                _LOGGER.error("Asset generation failed: %s", err)
                raise
        self._log_summary(bundle, collector.timings)
        return bundle

    async def async_generate(self, targets: Sequence[Asset]) -> Bundle:
        """Generate the targets from a running event loop.

        Independent branches are resolved concurrently when the orchestrator
        is configured with `concurrent`.
        """
        if not self.config.concurrent:
            return self.generate(targets)

        targets = _unique(targets)
        _LOGGER.info("Generating %d target assets concurrently", len(targets))
        store = InMemoryStore()
        with get_trace_collector() as collector, task_service_context() as service:
            try:
                graph = AssetGraph.build(targets)
                resolver = AsyncResolver(store, graph, service)
                await resolver.resolve_all(targets)
                bundle = self._aggregate(graph, targets, store)
            except AssetException as err:
                _LOGGER.error("Asset generation failed: %s", err)
                raise
        self._log_summary(bundle, collector.timings)
        return bundle

    def _aggregate(
        self, graph: AssetGraph, targets: Sequence[Asset], store: Store
    ) -> Bundle:
        """Build the bundle from the cached results of the run."""
        if self.config.include_dependencies:
            assets = graph.order()
        else:
            assets = list(targets)
        bundle = Bundle()
        for asset in assets:
            if (result := store.get_result(asset.key)) is None:
                raise AssetException(f"Asset {asset.key} was not generated")
            bundle.add(asset.key, result)
        return bundle

    def _log_summary(self, bundle: Bundle, timings: dict[str, float]) -> None:
        _LOGGER.info(
            "Generated %d files from %d assets", len(bundle), len(bundle.assets)
        )
        for name, duration in sorted(timings.items(), key=lambda x: x[1], reverse=True):
            _LOGGER.debug(" - %s: %0.4fs", name, duration)


def _unique(targets: Sequence[Asset]) -> list[Asset]:
    """Return the targets with repeated asset keys removed, keeping order."""
    seen: set[AssetKey] = set()
    result = []
    for target in targets:
        if target.key in seen:
            continue
        seen.add(target.key)
        result.append(target)
    return result
