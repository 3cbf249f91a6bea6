"""Tests for the bundle and its writer."""

from pathlib import Path

import pytest

from cluster_assets.asset import AssetKey, Content, ResultSet
from cluster_assets.exceptions import CollisionError, ConfigurationError
from cluster_assets.orchestrator import Bundle, write_bundle

FIRST = AssetKey("TestKind", "first")
SECOND = AssetKey("TestKind", "second")


def test_add() -> None:
    """Test files are kept in the order they are added."""
    bundle = Bundle()
    bundle.add(FIRST, ResultSet([Content(name="b.yml", data=b"b")]))
    bundle.add(SECOND, ResultSet([Content(name="a.yml", data=b"a")]))
    assert list(bundle) == ["b.yml", "a.yml"]
    assert [f.asset for f in bundle.files] == [FIRST, SECOND]
    assert bundle.assets == [FIRST, SECOND]


def test_add_same_asset_twice() -> None:
    """Test adding the same asset again is a no-op."""
    bundle = Bundle()
    result = ResultSet([Content(name="a.yml", data=b"a")])
    bundle.add(FIRST, result)
    bundle.add(FIRST, result)
    assert list(bundle) == ["a.yml"]


def test_collision_adds_nothing() -> None:
    """Test a colliding result set is rejected as a whole."""
    bundle = Bundle()
    bundle.add(FIRST, ResultSet([Content(name="a.yml", data=b"a")]))
    with pytest.raises(CollisionError):
        bundle.add(
            SECOND,
            ResultSet(
                [Content(name="b.yml", data=b"b"), Content(name="a.yml", data=b"x")]
            ),
        )
    assert list(bundle) == ["a.yml"]
    assert bundle["a.yml"] == b"a"


async def test_write_bundle(tmp_path: Path) -> None:
    """Test writing the bundle into a directory."""
    bundle = Bundle()
    bundle.add(
        FIRST,
        ResultSet(
            [
                Content(name="config.yml", data=b"key: value\n"),
                Content(name="manifests/empty.yml", data=b""),
            ]
        ),
    )
    output_dir = tmp_path / "out"
    written = await write_bundle(bundle, output_dir)
    assert written == [output_dir / "config.yml", output_dir / "manifests" / "empty.yml"]
    assert (output_dir / "config.yml").read_bytes() == b"key: value\n"
    assert (output_dir / "manifests" / "empty.yml").read_bytes() == b""


@pytest.mark.parametrize("name", ["../escape.yml", "/etc/escape.yml", "a/../../b.yml"])
async def test_write_bundle_rejects_paths(tmp_path: Path, name: str) -> None:
    """Test file names may not leave the output directory."""
    bundle = Bundle()
    bundle.add(
        FIRST,
        ResultSet(
            [Content(name="ok.yml", data=b"ok"), Content(name=name, data=b"bad")]
        ),
    )
    output_dir = tmp_path / "out"
    with pytest.raises(ConfigurationError, match="relative to the output directory"):
        await write_bundle(bundle, output_dir)
    assert not output_dir.exists()
