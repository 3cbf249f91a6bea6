"""Asset contract used by the dependency engine."""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from cluster_assets.exceptions import ConfigurationError

from .content import ResultSet

__all__ = [
    "AssetKey",
    "Asset",
    "Dependencies",
]


@dataclass(frozen=True, order=True)
class AssetKey:
    """Identifier for an asset within a single run."""

    kind: str
    name: str

    def __str__(self) -> str:
        """Return the kind and name concatenated as an id."""
        return f"{self.kind}/{self.name}"


class Asset(ABC):
    """A unit of derived output with an explicit list of dependencies.

    An asset is constructed with the assets it depends on and nothing else. Any
    upstream data it needs is read from the results passed to `generate`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a human friendly name for the asset."""

    @property
    def key(self) -> AssetKey:
        """Return the identity used to memoize this asset within a run."""
        return AssetKey(kind=self.__class__.__name__, name=self.name)

    @abstractmethod
    def dependencies(self) -> Sequence["Asset"]:
        """Return the assets directly needed by this asset.

        This must be free of side effects and return the same list every time
        it is called within a run.
        """

    @abstractmethod
    def generate(self, results: "Dependencies") -> ResultSet:
        """Generate the contents of this asset from its resolved dependencies."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.key}>"


class Dependencies(Mapping[AssetKey, ResultSet]):
    """Read-only view of the resolved results of an asset's dependencies.

    Entries may be looked up by `AssetKey` or by the `Asset` itself.
    """

    def __init__(self, results: Mapping[AssetKey, ResultSet]) -> None:
        """Initialize Dependencies."""
        self._results = dict(results)

    def __getitem__(self, key: AssetKey | Asset) -> ResultSet:
        if isinstance(key, Asset):
            key = key.key
        return self._results[key]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Asset):
            key = key.key
        return key in self._results

    def __iter__(self) -> Iterator[AssetKey]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def content(self, asset: AssetKey | Asset, file_name: str) -> bytes:
        """Return a named payload produced by a dependency."""
        key = asset.key if isinstance(asset, Asset) else asset
        if key not in self._results:
            raise ConfigurationError(f"Dependency {key} was not resolved")
        result_set = self._results[key]
        if file_name not in result_set:
            raise ConfigurationError(
                f"Dependency {key} did not produce '{file_name}'", key
            )
        return result_set[file_name]
