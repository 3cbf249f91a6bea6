"""Tests for the asset dependency graph."""

import pytest

from cluster_assets.asset import AssetGraph
from cluster_assets.exceptions import CycleError

from tests.stubs import StubAsset


def test_diamond_order() -> None:
    """Test every asset of a diamond appears once, dependencies first."""
    d = StubAsset("d")
    b = StubAsset("b", [d])
    c = StubAsset("c", [d])
    a = StubAsset("a", [b, c])

    graph = AssetGraph.build([a])
    assert [asset.name for asset in graph.order()] == ["d", "b", "c", "a"]
    assert len(graph) == 4
    assert d in graph
    assert [dep.name for dep in graph.dependencies(a.key)] == ["b", "c"]
    assert [dep.name for dep in graph.closure(a)] == ["d", "b", "c"]
    assert graph.closure(d) == []


def test_dependencies_called_once() -> None:
    """Test that each asset is asked for its dependencies once."""
    d = StubAsset("d")
    b = StubAsset("b", [d])
    c = StubAsset("c", [d])
    a = StubAsset("a", [b, c])

    AssetGraph.build([a, b, c])
    assert [asset.dependency_calls for asset in (a, b, c, d)] == [1, 1, 1, 1]


def test_same_key_is_same_asset() -> None:
    """Test that two instances with the same key are one asset."""
    first = StubAsset("shared")
    second = StubAsset("shared")
    a = StubAsset("a", [first])
    b = StubAsset("b", [second])

    graph = AssetGraph.build([a, b])
    assert len(graph) == 3
    assert graph.get(second.key) is first


def test_multiple_targets() -> None:
    """Test building a graph from several targets."""
    shared = StubAsset("shared")
    a = StubAsset("a", [shared])
    b = StubAsset("b", [shared])

    graph = AssetGraph.build([a, b])
    assert [asset.name for asset in graph.order()] == ["shared", "a", "b"]


def test_cycle() -> None:
    """Test that a cycle is reported with its path."""
    a = StubAsset("a")
    b = StubAsset("b", [a])
    a.depends_on(b)

    with pytest.raises(CycleError, match="StubAsset/a -> StubAsset/b -> StubAsset/a") as exc_info:
        AssetGraph.build([a])
    assert exc_info.value.cycle == [a.key, b.key, a.key]
    assert exc_info.value.asset == a.key


def test_self_dependency() -> None:
    """Test that an asset depending on itself is a cycle."""
    a = StubAsset("a")
    a.depends_on(a)

    with pytest.raises(CycleError):
        AssetGraph.build([a])


def test_transitive_cycle_below_target() -> None:
    """Test a cycle that does not include the target."""
    c = StubAsset("c")
    b = StubAsset("b", [c])
    c.depends_on(b)
    a = StubAsset("a", [b])

    with pytest.raises(CycleError) as exc_info:
        AssetGraph.build([a])
    assert exc_info.value.cycle == [b.key, c.key, b.key]


def test_cycle_leaves_graph_unchanged() -> None:
    """Test a failed add records nothing, so later adds still find the cycle."""
    leaf = StubAsset("leaf")
    a = StubAsset("a")
    b = StubAsset("b", [a, leaf])
    a.depends_on(b)
    c = StubAsset("c", [b])

    graph = AssetGraph()
    with pytest.raises(CycleError):
        graph.add(a)
    assert len(graph) == 0
    assert a not in graph
    assert leaf not in graph

    with pytest.raises(CycleError) as exc_info:
        graph.add(c)
    assert exc_info.value.cycle == [b.key, a.key, b.key]


def test_path() -> None:
    """Test the dependency path from a target down to an asset."""
    d = StubAsset("d")
    c = StubAsset("c", [d])
    b = StubAsset("b")
    a = StubAsset("a", [b, c])

    graph = AssetGraph.build([a])
    assert graph.path(a.key, d.key) == [a.key, c.key, d.key]
    assert graph.path(a.key, a.key) == [a.key]
    with pytest.raises(KeyError):
        graph.path(b.key, d.key)
