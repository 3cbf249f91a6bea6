"""Dependency resolution for assets.

The resolvers execute every asset in the transitive dependency closure of a
requested asset exactly once, handing each asset the fully resolved results of
its declared dependencies. Results are memoized in a Store keyed by AssetKey,
which is shared by every request within a run.

Key Concepts:
    - AssetGraph: Records the dependencies of every reachable asset and rejects
      cycles before anything is generated.
    - Store: The resolution cache, holding result sets and generation status.
    - Resolver: Synchronous depth-first resolution.
    - AsyncResolver: Resolves independent branches of the graph concurrently.
"""

import asyncio
from collections.abc import Sequence
import logging

from cluster_assets.asset import Asset, AssetGraph, AssetKey, Dependencies, ResultSet
from cluster_assets.context import trace_context
from cluster_assets.exceptions import (
    AssetException,
    DependencyFailedError,
    GenerationError,
)
from cluster_assets.store import InMemoryStore, Status, Store
from cluster_assets.task import TaskService, get_task_service

__all__ = [
    "Resolver",
    "AsyncResolver",
]

_LOGGER = logging.getLogger(__name__)


def generate_asset(
    asset: Asset, results: Dependencies, path: Sequence[AssetKey]
) -> ResultSet:
    """Invoke generate on an asset, attaching its identity to any failure.

    Args:
        asset: The asset to generate.
        results: The resolved results of the declared dependencies of the asset.
        path: The resolution path from the requested target down to the asset.
    """
    try:
        result = asset.generate(results)
    except AssetException as err:
        if err.asset is None:
            err.asset = asset.key
        if not err.path:
            err.path = list(path)
        raise
    except Exception as err:
        wrapped = GenerationError(f"Failed to generate: {err}", asset.key)
        wrapped.path = list(path)
        raise wrapped from err
    if not isinstance(result, ResultSet):
        err = GenerationError(
            f"Generate returned {result.__class__.__name__}, expected ResultSet",
            asset.key,
        )
        err.path = list(path)
        raise err
    return result


class Resolver:
    """Resolves assets one at a time in dependency order."""

    def __init__(
        self, store: Store | None = None, graph: AssetGraph | None = None
    ) -> None:
        """Initialize the resolver.

        Args:
            store: The resolution cache, shared by every request of a run.
            graph: The dependency graph of the run, extended as assets are requested.
        """
        self._store = store or InMemoryStore()
        self._graph = graph or AssetGraph()

    @property
    def store(self) -> Store:
        """Return the resolution cache."""
        return self._store

    def resolve(self, asset: Asset) -> ResultSet:
        """Return the result set of an asset, generating it and its dependencies.

        Raises:
            CycleError: If the dependency graph of the asset contains a cycle.
            AssetException: If any asset in the dependency closure fails.
        """
        self._graph.add(asset)
        target = self._graph.get(asset.key)
        # The closure is in dependency order, so every dependency is cached
        # before its dependents generate.
        for node in self._graph.closure(target) + [target]:
            if self._store.get_result(node.key) is None:
                self._generate(target, node)
        return self._cached(target)

    def _generate(self, target: Asset, asset: Asset) -> None:
        key = asset.key
        deps = self._graph.dependencies(key)
        results = Dependencies({dep.key: self._cached(dep) for dep in deps})

        _LOGGER.debug("Generating %s with %d dependencies", key, len(results))
        self._store.update_status(key, Status.PENDING)
        try:
            with trace_context(str(key)):
                result = generate_asset(
                    asset, results, self._graph.path(target.key, key)
                )
        except AssetException as err:
            self._store.update_status(key, Status.FAILED, error=str(err))
            raise
        self._store.set_result(key, result)
        self._store.update_status(key, Status.READY)

    def _cached(self, asset: Asset) -> ResultSet:
        if (result := self._store.get_result(asset.key)) is None:
            raise AssetException(f"Dependency {asset.key} was not generated")
        return result


class AsyncResolver:
    """Resolves independent branches of the dependency graph concurrently.

    Every asset is generated in its own task, and the generate call itself runs
    in a worker thread. An asset is claimed in the store before any of its work
    is scheduled, so concurrent requests for the same asset wait on the first
    request instead of generating it again.
    """

    def __init__(
        self,
        store: Store | None = None,
        graph: AssetGraph | None = None,
        task_service: TaskService | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            store: The resolution cache, shared by every request of a run.
            graph: The dependency graph of the run, extended as assets are requested.
            task_service: Tracks the tasks of the run so they can be cancelled.
        """
        self._store = store or InMemoryStore()
        self._graph = graph or AssetGraph()
        self._task_service = task_service or get_task_service()
        self._errors: dict[AssetKey, AssetException] = {}

    @property
    def store(self) -> Store:
        """Return the resolution cache."""
        return self._store

    async def resolve(self, asset: Asset) -> ResultSet:
        """Return the result set of an asset, generating it and its dependencies."""
        (result,) = await self.resolve_all([asset])
        return result

    async def resolve_all(self, assets: Sequence[Asset]) -> list[ResultSet]:
        """Resolve several assets concurrently, sharing their common dependencies.

        The first failure cancels every task that is still running and is
        raised to the caller.

        Raises:
            CycleError: If the dependency graph contains a cycle. Nothing is
                generated in that case.
            AssetException: If any asset in the dependency closure fails.
        """
        for asset in assets:
            self._graph.add(asset)
        tasks = [
            self._task_service.create_task(
                self._resolve(self._graph.get(asset.key), []), name=str(asset.key)
            )
            for asset in assets
        ]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            await self._task_service.cancel_all()

    async def _resolve(self, asset: Asset, path: list[AssetKey]) -> ResultSet:
        key = asset.key
        if (cached := self._store.get_result(key)) is not None:
            return cached
        if not self._store.claim(key):
            _LOGGER.debug("Waiting for %s generated by another task", key)
            try:
                return await self._store.watch_ready(key)
            except DependencyFailedError:
                if (original := self._errors.get(key)) is not None:
                    raise original
                raise

        path = path + [key]
        deps = self._graph.dependencies(key)
        try:
            tasks = [
                self._task_service.create_task(
                    self._resolve(dep, path), name=str(dep.key)
                )
                for dep in deps
            ]
            resolved = await asyncio.gather(*tasks)
            results = Dependencies(
                {dep.key: result for dep, result in zip(deps, resolved)}
            )
            _LOGGER.debug("Generating %s with %d dependencies", key, len(results))
            with trace_context(str(key)):
                result = await asyncio.to_thread(generate_asset, asset, results, path)
        except asyncio.CancelledError:
            self._store.update_status(key, Status.FAILED, error="Generation cancelled")
            raise
        except AssetException as err:
            self._errors[key] = err
            self._store.update_status(key, Status.FAILED, error=str(err))
            raise
        self._store.set_result(key, result)
        self._store.update_status(key, Status.READY)
        return result
