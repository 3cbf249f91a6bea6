"""Dependency graph of the assets reachable from a set of targets.

The graph is built once per run, before any asset generates. Building it asks
every reachable asset for its dependencies exactly once and validates that the
graph is acyclic, so the resolver can rely on the recorded dependency lists.
"""

from collections.abc import Iterable, Sequence
import logging

from cluster_assets.exceptions import CycleError

from .asset import Asset, AssetKey

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "AssetGraph",
]


class AssetGraph:
    """Directed acyclic graph of assets keyed by AssetKey."""

    def __init__(self) -> None:
        """Initialize an empty AssetGraph."""
        self._assets: dict[AssetKey, Asset] = {}
        self._edges: dict[AssetKey, tuple[AssetKey, ...]] = {}
        self._order: list[AssetKey] = []

    @classmethod
    def build(cls, targets: Iterable[Asset]) -> "AssetGraph":
        """Build the graph reachable from the targets.

        Raises:
            CycleError: If any asset depends on itself directly or transitively.
        """
        graph = cls()
        for target in targets:
            graph.add(target)
        return graph

    def add(self, target: Asset) -> None:
        """Add an asset and everything reachable from it to the graph.

        The graph is left unchanged when a cycle is found.
        """
        if target.key in self._edges:
            return
        # Iterative depth-first walk; the explicit stack holds the keys that
        # are currently being visited and is used to report cycles.
        assets: dict[AssetKey, Asset] = {}
        edges: dict[AssetKey, tuple[AssetKey, ...]] = {}
        order: list[AssetKey] = []
        visiting: list[AssetKey] = []
        on_stack: set[AssetKey] = set()
        stack: list[tuple[Asset, list[Asset]]] = []

        def enter(asset: Asset) -> None:
            assets[asset.key] = asset
            deps = list(asset.dependencies())
            edges[asset.key] = tuple(dep.key for dep in deps)
            visiting.append(asset.key)
            on_stack.add(asset.key)
            stack.append((asset, list(reversed(deps))))

        enter(target)
        while stack:
            asset, remaining = stack[-1]
            if not remaining:
                stack.pop()
                visiting.pop()
                on_stack.discard(asset.key)
                order.append(asset.key)
                continue
            dep = remaining.pop()
            if dep.key in on_stack:
                start = visiting.index(dep.key)
                raise CycleError(visiting[start:] + [dep.key])
            if dep.key in edges or dep.key in self._edges:
                continue
            enter(dep)

        self._assets.update(assets)
        self._edges.update(edges)
        self._order.extend(order)
        _LOGGER.debug("Dependency graph for %s has %d assets", target.key, len(self))

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Asset):
            key = key.key
        return key in self._edges

    def get(self, key: AssetKey) -> Asset:
        """Return the asset registered for the key."""
        return self._assets[key]

    def dependencies(self, key: AssetKey) -> Sequence[Asset]:
        """Return the recorded direct dependencies of an asset."""
        return [self._assets[dep] for dep in self._edges[key]]

    def order(self) -> list[Asset]:
        """Return every asset with dependencies before their dependents."""
        return [self._assets[key] for key in self._order]

    def closure(self, target: Asset) -> list[Asset]:
        """Return the transitive dependencies of a target in dependency order."""
        seen: set[AssetKey] = set()
        pending = list(self._edges[target.key])
        while pending:
            key = pending.pop()
            if key in seen:
                continue
            seen.add(key)
            pending.extend(self._edges[key])
        return [self._assets[key] for key in self._order if key in seen]

    def path(self, source: AssetKey, target: AssetKey) -> list[AssetKey]:
        """Return a dependency path from source down to target, both included."""
        parents: dict[AssetKey, AssetKey | None] = {source: None}
        pending = [source]
        while pending and target not in parents:
            key = pending.pop()
            for dep in self._edges[key]:
                if dep not in parents:
                    parents[dep] = key
                    pending.append(dep)
        if target not in parents:
            raise KeyError(f"{target} is not a dependency of {source}")
        path: list[AssetKey] = []
        node: AssetKey | None = target
        while node is not None:
            path.append(node)
            node = parents[node]
        return list(reversed(path))
