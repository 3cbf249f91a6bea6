"""Aggregated output of a run and the writer that persists it."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
import logging
from pathlib import Path, PurePosixPath

import aiofiles
import aiofiles.os

from cluster_assets.asset import AssetKey, ResultSet
from cluster_assets.exceptions import CollisionError, ConfigurationError

__all__ = [
    "Bundle",
    "BundleFile",
    "write_bundle",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BundleFile:
    """A single output file and the asset that produced it."""

    name: str
    data: bytes
    asset: AssetKey


class Bundle(Mapping[str, bytes]):
    """The ordered, collision free output files of a run.

    Maps file name to payload. Files are kept in the order the producing assets
    were added, and within an asset in the order the asset produced them.
    """

    def __init__(self) -> None:
        """Initialize an empty Bundle."""
        self._files: dict[str, BundleFile] = {}
        self._assets: list[AssetKey] = []

    def add(self, key: AssetKey, result: ResultSet) -> None:
        """Add the result set of an asset to the bundle.

        Adding the same asset more than once has no effect.

        Raises:
            CollisionError: If another asset already produced one of the file names.
        """
        if key in self._assets:
            return
        for content in result.contents:
            if (existing := self._files.get(content.name)) is not None:
                raise CollisionError(content.name, [existing.asset, key])
        for content in result.contents:
            self._files[content.name] = BundleFile(
                name=content.name, data=content.data, asset=key
            )
        self._assets.append(key)

    @property
    def assets(self) -> list[AssetKey]:
        """Return the assets that contributed to the bundle."""
        return list(self._assets)

    @property
    def files(self) -> list[BundleFile]:
        """Return the files of the bundle in output order."""
        return list(self._files.values())

    def producer(self, name: str) -> AssetKey:
        """Return the asset that produced the named file."""
        return self._files[name].asset

    def __getitem__(self, name: str) -> bytes:
        return self._files[name].data

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)


def _target_path(directory: Path, name: str) -> Path:
    relative = PurePosixPath(name)
    if relative.is_absolute() or ".." in relative.parts:
        raise ConfigurationError(
            f"Output file name '{name}' must be relative to the output directory"
        )
    return directory.joinpath(*relative.parts)


async def write_bundle(bundle: Bundle, directory: Path) -> list[Path]:
    """Write every file of the bundle under the directory.

    Returns:
        The paths of the written files, in output order.
    """
    # Resolve every path before writing so an invalid name writes nothing
    targets = [(_target_path(directory, f.name), f) for f in bundle.files]
    written: list[Path] = []
    for path, bundle_file in targets:
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(str(path), mode="wb") as output:
            await output.write(bundle_file.data)
        _LOGGER.debug(
            "Wrote %s (%d bytes) from %s",
            path,
            len(bundle_file.data),
            bundle_file.asset,
        )
        written.append(path)
    _LOGGER.info("Wrote %d files to %s", len(written), directory)
    return written
